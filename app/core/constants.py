# app/core/constants.py

# ==========================================================
# REGISTRATION WIZARD STEPS
# ==========================================================
PERSONAL_INFO_STEP = 1
OTHER_DETAILS_STEP = 2
EDUCATION_STEP = 3
EXPERIENCE_STEP = 4
DOCUMENTS_STEP = 5
PAYMENT_STEP = 6
REVIEW_STEP = 7

FIRST_STEP = PERSONAL_INFO_STEP
LAST_STEP = REVIEW_STEP

# optional step -> step that must be completed before it can be skipped
OPTIONAL_STEPS = {EXPERIENCE_STEP: EDUCATION_STEP}

REGISTRATION_STEPS = [
    {"id": PERSONAL_INFO_STEP, "title": "Personal Info", "description": "Basic details"},
    {"id": OTHER_DETAILS_STEP, "title": "Other Details", "description": "Additional info"},
    {"id": EDUCATION_STEP, "title": "Education", "description": "Qualifications"},
    {"id": EXPERIENCE_STEP, "title": "Experience", "description": "Work history"},
    {"id": DOCUMENTS_STEP, "title": "Documents", "description": "Upload files"},
    {"id": PAYMENT_STEP, "title": "Payment", "description": "Fee payment"},
    {"id": REVIEW_STEP, "title": "Review", "description": "Final check"},
]

# ==========================================================
# FEES
# ==========================================================
# Categories whose fee is waived (stored lowercase)
EXEMPT_CATEGORIES = {"sc", "st"}

# personal_info.category -> category_payments.category
FEE_CATEGORY_ALIASES = {
    "ur": "general",
    "general": "general",
}

DEFAULT_CATEGORY_FEES = {
    "general": 500,
    "obc": 300,
    "ews": 300,
    "sc": 0,
    "st": 0,
}

# ==========================================================
# DOCUMENTS
# ==========================================================
ALLOWED_DOCUMENT_MIME_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "application/pdf": "pdf",
}
MAX_DOCUMENT_SIZE = 5 * 1024 * 1024  # 5MB Cap

# ==========================================================
# APPLICATION NUMBERS
# ==========================================================
APPLICATION_NUMBER_PREFIX = "REG"
APPLICATION_NUMBER_SUFFIX_DIGITS = 7
