from fastapi import APIRouter

from plumbprep import schemas
from plumbprep.services import bulk_pricing_service

router = APIRouter(prefix="/bulk-pricing", tags=["pricing"])


@router.get("/tiers", response_model=list[schemas.BulkPricingTier])
def get_bulk_pricing_tiers() -> list[schemas.BulkPricingTier]:
    return bulk_pricing_service.get_bulk_pricing_tiers()


@router.post("/calculate", response_model=schemas.BulkPricingQuote)
def calculate_bulk_price(request: schemas.BulkPricingRequest) -> schemas.BulkPricingQuote:
    """Quote for enrolling a team of plumbers. Public."""
    return bulk_pricing_service.calculate_bulk_price(request)
