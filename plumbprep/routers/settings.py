from fastapi import APIRouter

from plumbprep import schemas
from plumbprep.config import get_settings
from plumbprep.feature_flags import get_feature_flags

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("")
async def get_app_settings() -> schemas.AppSettingsResponse:
    """
    Get public application settings.

    Returns non-user-specific settings that affect application behavior.
    This is a public endpoint that doesn't require authentication.
    """
    settings = get_settings()
    flags = get_feature_flags()

    return schemas.AppSettingsResponse(
        allow_user_registrations=flags.user_registrations,
        ai_features=flags.ai,
        quiz_passing_score=settings.QUIZ_PASSING_SCORE,
        feature_flags=flags,
    )
