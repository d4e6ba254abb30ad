"""Plumbing calculators."""

import structlog

from plumbprep import schemas
from plumbprep.services.ai.ai_service import get_pipe_size_recommendation

logger = structlog.get_logger(__name__)

MATERIAL_NAMES = {
    "copper_l": "Copper Type L",
    "copper_m": "Copper Type M",
    "pex": "PEX",
    "cpvc": "CPVC",
    "pvc": "PVC",
}


async def calculate_pipe_size(request: schemas.PipeSizeRequest) -> schemas.PipeSizeResult:
    recommendation = await get_pipe_size_recommendation(
        request.fixture_units, request.pipe_length, MATERIAL_NAMES[request.material]
    )
    logger.info(
        "pipe_size_calculated",
        fixture_units=request.fixture_units,
        pipe_length=request.pipe_length,
        material=request.material,
        recommended_size=recommendation.recommended_size,
    )
    return schemas.PipeSizeResult(**recommendation.model_dump())
