# Models module
from .user import User, UserRole
from .profile import Profile
from .family_member import FamilyMember
from .education_detail import EducationDetail
from .employment_detail import EmploymentDetail
from .skill import Skill
from .job import Job
from .job_application import JobApplication
from .payment import Payment
from .bulk_upload_log import BulkUploadLog

__all__ = [
    "User",
    "UserRole",
    "Profile",
    "FamilyMember",
    "EducationDetail",
    "EmploymentDetail",
    "Skill",
    "Job",
    "JobApplication",
    "Payment",
    "BulkUploadLog"
]
