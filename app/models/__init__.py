from app.models.user import User, UserRole
from app.models.profile import Profile, PhoneOtp
from app.models.post import Post, CategoryPayment
from app.models.application import Application
from app.models.personal_info import PersonalInfo
from app.models.other_details import OtherDetails
from app.models.education import EducationalQualification
from app.models.experience import ExperienceInfo
from app.models.document import Document
from app.models.payment import Payment
from app.models.audit import AuditLog

__all__ = [
    "User",
    "UserRole",
    "Profile",
    "PhoneOtp",
    "Post",
    "CategoryPayment",
    "Application",
    "PersonalInfo",
    "OtherDetails",
    "EducationalQualification",
    "ExperienceInfo",
    "Document",
    "Payment",
    "AuditLog",
]
