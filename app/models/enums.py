from enum import Enum

class ApplicationStatus(str, Enum):
    Draft = "draft"
    DocumentPending = "document_pending"
    PaymentPending = "payment_pending"
    PaymentCompleted = "payment_completed"
    Submitted = "submitted"


# Forward-only ordering used when a step save advances the application
APPLICATION_STATUS_ORDER = [
    ApplicationStatus.Draft,
    ApplicationStatus.DocumentPending,
    ApplicationStatus.PaymentPending,
    ApplicationStatus.PaymentCompleted,
    ApplicationStatus.Submitted,
]


class PaymentStatus(str, Enum):
    Pending = "pending"
    Completed = "completed"
    Failed = "failed"
    Refunded = "refunded"
    Exempted = "exempted"


class PaymentMethod(str, Enum):
    Razorpay = "razorpay"
    Exempted = "exempted"


class Gender(str, Enum):
    Male = "male"
    Female = "female"
    Other = "other"


class Category(str, Enum):
    General = "general"
    OBC = "obc"
    SC = "sc"
    ST = "st"
    EWS = "ews"


class DocumentType(str, Enum):
    Photo = "photo"
    Signature = "signature"


class DocumentStatus(str, Enum):
    Uploaded = "uploaded"
    Verified = "verified"
    Rejected = "rejected"


class AuditAction(str, Enum):
    CandidateSignup = "CANDIDATE_SIGNUP"
    PaymentCompleted = "PAYMENT_COMPLETED"
    ApplicationSubmitted = "APPLICATION_SUBMITTED"
