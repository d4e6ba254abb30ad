"""Repository layer for database operations using repository pattern."""

from plumbprep.repositories.achievement_repository import (
    AchievementRepository,
    PointsRepository,
    UserAchievementRepository,
)
from plumbprep.repositories.beta_repository import BetaSignupRepository
from plumbprep.repositories.bulk_enrollment_repository import BulkEnrollmentRepository
from plumbprep.repositories.course_repository import CourseContentRepository, CourseRepository
from plumbprep.repositories.employer_repository import EmployerRepository
from plumbprep.repositories.enrollment_repository import EnrollmentRepository
from plumbprep.repositories.job_repository import JobApplicationRepository, JobRepository
from plumbprep.repositories.mentor_repository import (
    ChatAnswerRepository,
    MentorConversationRepository,
)
from plumbprep.repositories.notification_repository import NotificationRepository
from plumbprep.repositories.product_repository import (
    CartRepository,
    ProductRepository,
    ProductReviewRepository,
)
from plumbprep.repositories.progress_repository import (
    QuizAttemptRepository,
    SectionProgressRepository,
)
from plumbprep.repositories.referral_repository import (
    MonthlyCommissionRepository,
    ReferralRepository,
)
from plumbprep.repositories.study_session_repository import StudySessionRepository
from plumbprep.repositories.user_repository import UserRepository

__all__ = [
    "AchievementRepository",
    "BetaSignupRepository",
    "BulkEnrollmentRepository",
    "CartRepository",
    "ChatAnswerRepository",
    "CourseContentRepository",
    "CourseRepository",
    "EmployerRepository",
    "EnrollmentRepository",
    "JobApplicationRepository",
    "JobRepository",
    "MentorConversationRepository",
    "MonthlyCommissionRepository",
    "NotificationRepository",
    "PointsRepository",
    "ProductRepository",
    "ProductReviewRepository",
    "QuizAttemptRepository",
    "ReferralRepository",
    "SectionProgressRepository",
    "StudySessionRepository",
    "UserAchievementRepository",
    "UserRepository",
]
