from fastapi import APIRouter, status

from plumbprep import schemas
from plumbprep.database import DatabaseSession
from plumbprep.services import BetaService

router = APIRouter(prefix="/beta", tags=["beta"])


@router.get("/status", response_model=schemas.BetaStatus)
def get_beta_status(db: DatabaseSession) -> schemas.BetaStatus:
    return BetaService(db).get_status()


@router.post("/signup", response_model=schemas.BetaSignupResponse, status_code=status.HTTP_201_CREATED)
def beta_signup(request: schemas.BetaSignupRequest, db: DatabaseSession) -> schemas.BetaSignupResponse:
    """Claim one of the limited beta spots. Public."""
    return BetaService(db).signup(request)
