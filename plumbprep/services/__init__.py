"""Service layer for business logic."""

from plumbprep.services import auth_service, calculator_service
from plumbprep.services.achievement_service import AchievementService
from plumbprep.services.beta_service import BetaService
from plumbprep.services.bulk_enrollment_service import BulkEnrollmentService
from plumbprep.services.course_service import CourseService
from plumbprep.services.employer_service import EmployerService
from plumbprep.services.job_service import JobService
from plumbprep.services.mentor_service import MentorService
from plumbprep.services.notification_service import NotificationService
from plumbprep.services.progress_service import ProgressService
from plumbprep.services.referral_service import ReferralService
from plumbprep.services.store_service import StoreService
from plumbprep.services.study_session_service import StudySessionService
from plumbprep.services.subscription_service import SubscriptionService
from plumbprep.services.users_service import UserService

__all__ = [
    "AchievementService",
    "BetaService",
    "BulkEnrollmentService",
    "CourseService",
    "EmployerService",
    "JobService",
    "MentorService",
    "NotificationService",
    "ProgressService",
    "ReferralService",
    "StoreService",
    "StudySessionService",
    "SubscriptionService",
    "UserService",
    "auth_service",
    "calculator_service",
]
