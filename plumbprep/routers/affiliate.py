from fastapi import APIRouter

from plumbprep import schemas
from plumbprep.dependencies import CurrentUser
from plumbprep.services.affiliate_service import extract_asin, generate_affiliate_link

router = APIRouter(prefix="/affiliate", tags=["affiliate"])


@router.post("/link", response_model=schemas.AffiliateLinkResponse)
def create_affiliate_link(
    request: schemas.AffiliateLinkRequest, current_user: CurrentUser
) -> schemas.AffiliateLinkResponse:
    """Tag an Amazon URL or ASIN with the store's associate id."""
    asin = request.asin.upper() if request.asin else extract_asin(request.url or "")
    return schemas.AffiliateLinkResponse(
        affiliate_url=generate_affiliate_link(request.url, request.asin),
        asin=asin,
    )
