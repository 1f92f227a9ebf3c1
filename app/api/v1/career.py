from fastapi import APIRouter, Depends

from app.core.security import current_user_id, require_api_key
from app.schemas.users import OnboardingRequest, OnboardingResponse
from app.services import career_service
from app.services.errors import CareerServiceError
from app.api.v1.errors import raise_http_error

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.post("/career/onboarding", response_model=OnboardingResponse)
async def analyze_onboarding(
    payload: OnboardingRequest,
    user_id: str | None = Depends(current_user_id),
):
    try:
        return await career_service.onboard(
            user_id,
            interest=payload.interest,
            hobby=payload.hobby,
            education=payload.education,
        )
    except CareerServiceError as exc:
        raise_http_error(exc)
