"""Pydantic schemas for request/response validation."""

from plumbprep.schemas.achievement_schemas import (
    Achievement,
    AchievementAwardRequest,
    LeaderboardEntry,
    LeaderboardResponse,
    PointsSummary,
    UserAchievement,
)
from plumbprep.schemas.beta_schemas import BetaSignupRequest, BetaSignupResponse, BetaStatus
from plumbprep.schemas.bulk_enrollment_schemas import (
    BulkEnrollmentApproveResponse,
    BulkEnrollmentCreate,
    BulkEnrollmentCreateResponse,
    BulkEnrollmentListResponse,
    BulkEnrollmentRequest,
    BulkStudent,
    BulkStudentEnrollment,
    BulkStudentListResponse,
)
from plumbprep.schemas.calculator_schemas import PipeSizeRequest, PipeSizeResult
from plumbprep.schemas.course_schemas import (
    Course,
    CourseContent,
    CourseContentCreate,
    CourseContentUpdate,
    CourseStats,
    Enrollment,
    EnrollmentProgressUpdate,
    StudyPlan,
)
from plumbprep.schemas.job_schemas import (
    Employer,
    EmployerCreate,
    EmployerJob,
    Job,
    JobApplicant,
    JobApplication,
    JobApplicationCreate,
    JobCreate,
    JobListResponse,
    JobPostingQuote,
    JobPostingQuoteRequest,
    JobRejectRequest,
    JobStatusUpdate,
    JobUpdate,
    PaymentIntentResponse,
)
from plumbprep.schemas.mentor_schemas import (
    ChatAnswerCreate,
    ChatAnswerImportRequest,
    ChatAnswerImportResponse,
    MentorChatRequest,
    MentorChatResponse,
    MentorConversation,
)
from plumbprep.schemas.notification_schemas import (
    MarkAllReadResponse,
    Notification,
    NotificationListResponse,
    UnreadCountResponse,
)
from plumbprep.schemas.pricing_schemas import BulkPricingQuote, BulkPricingRequest, BulkPricingTier
from plumbprep.schemas.progress_schemas import (
    QuizAttempt,
    QuizAttemptCreate,
    QuizAttemptResult,
    SectionStatus,
    SectionStatusResponse,
    SectionUnlockedResponse,
)
from plumbprep.schemas.referral_schemas import (
    EarningsPotential,
    MonthlyCommission,
    MonthlyEarnings,
    MonthlyEarningsSummary,
    Referral,
    ReferralCommission,
    ReferralStats,
)
from plumbprep.schemas.settings_schemas import AppSettingsResponse
from plumbprep.schemas.store_schemas import (
    AffiliateLinkRequest,
    AffiliateLinkResponse,
    CartItem,
    CartItemAdd,
    CartItemUpdate,
    CartResponse,
    Product,
    ProductCreate,
    ProductListResponse,
    ProductUpdate,
    Review,
    ReviewCreate,
)
from plumbprep.schemas.study_session_schemas import (
    StudyPlanSessionCreate,
    StudyPlanSessionUpdate,
    StudySession,
    StudySessionListResponse,
    StudySessionStartRequest,
    StudyStats,
)
from plumbprep.schemas.subscription_schemas import (
    SubscriptionCancelResponse,
    SubscriptionCreateRequest,
    SubscriptionCreateResponse,
    SubscriptionStatusResponse,
    SubscriptionUpgradeRequest,
    SubscriptionUpgradeResponse,
    WebhookResponse,
)
from plumbprep.schemas.user_schemas import (
    UserDetailsResponse,
    UserRegisterRequest,
    UserUpdateRequest,
)

__all__ = [
    "Achievement",
    "AchievementAwardRequest",
    "AffiliateLinkRequest",
    "AffiliateLinkResponse",
    "AppSettingsResponse",
    "BetaSignupRequest",
    "BetaSignupResponse",
    "BetaStatus",
    "BulkEnrollmentApproveResponse",
    "BulkEnrollmentCreate",
    "BulkEnrollmentCreateResponse",
    "BulkEnrollmentListResponse",
    "BulkEnrollmentRequest",
    "BulkPricingQuote",
    "BulkPricingRequest",
    "BulkPricingTier",
    "BulkStudent",
    "BulkStudentEnrollment",
    "BulkStudentListResponse",
    "CartItem",
    "CartItemAdd",
    "CartItemUpdate",
    "CartResponse",
    "ChatAnswerCreate",
    "ChatAnswerImportRequest",
    "ChatAnswerImportResponse",
    "Course",
    "CourseContent",
    "CourseContentCreate",
    "CourseContentUpdate",
    "CourseStats",
    "EarningsPotential",
    "Employer",
    "EmployerCreate",
    "EmployerJob",
    "Enrollment",
    "EnrollmentProgressUpdate",
    "Job",
    "JobApplicant",
    "JobApplication",
    "JobApplicationCreate",
    "JobCreate",
    "JobListResponse",
    "JobPostingQuote",
    "JobPostingQuoteRequest",
    "JobRejectRequest",
    "JobStatusUpdate",
    "JobUpdate",
    "LeaderboardEntry",
    "LeaderboardResponse",
    "MarkAllReadResponse",
    "MentorChatRequest",
    "MentorChatResponse",
    "MentorConversation",
    "MonthlyCommission",
    "MonthlyEarnings",
    "MonthlyEarningsSummary",
    "Notification",
    "NotificationListResponse",
    "PaymentIntentResponse",
    "PipeSizeRequest",
    "PipeSizeResult",
    "PointsSummary",
    "Product",
    "ProductCreate",
    "ProductListResponse",
    "ProductUpdate",
    "QuizAttempt",
    "QuizAttemptCreate",
    "QuizAttemptResult",
    "Referral",
    "ReferralCommission",
    "ReferralStats",
    "Review",
    "ReviewCreate",
    "SectionStatus",
    "SectionStatusResponse",
    "SectionUnlockedResponse",
    "StudyPlan",
    "StudyPlanSessionCreate",
    "StudyPlanSessionUpdate",
    "StudySession",
    "StudySessionListResponse",
    "StudySessionStartRequest",
    "StudyStats",
    "SubscriptionCancelResponse",
    "SubscriptionCreateRequest",
    "SubscriptionCreateResponse",
    "SubscriptionStatusResponse",
    "SubscriptionUpgradeRequest",
    "SubscriptionUpgradeResponse",
    "UnreadCountResponse",
    "UserAchievement",
    "UserDetailsResponse",
    "UserRegisterRequest",
    "UserUpdateRequest",
    "WebhookResponse",
]
