"""API routes for plumbing calculators."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from plumbprep import schemas
from plumbprep.dependencies import require_ai_enabled, require_feature
from plumbprep.exceptions import PlumbPrepError
from plumbprep.models import User
from plumbprep.services import calculator_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calculator", tags=["calculator"])


@router.post("/pipe-size", response_model=schemas.PipeSizeResult)
@require_ai_enabled
async def calculate_pipe_size(
    request: schemas.PipeSizeRequest,
    current_user: Annotated[User, Depends(require_feature("basic_calculators"))],
) -> schemas.PipeSizeResult:
    """
    Recommend a water supply pipe size.

    Args:
        request: Fixture units, developed length and pipe material

    Raises:
        HTTPException 410: If AI features are disabled
        HTTPException 500: If the calculation fails
    """
    try:
        return await calculator_service.calculate_pipe_size(request)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Pipe size calculation failed for user {current_user.id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to calculate pipe size. Please try again later.",
        ) from e
