from fastapi import APIRouter, Depends, status

from app.core.security import current_user_id, require_api_key
from app.schemas.users import SubscriptionResponse, UserCreateRequest, UserProfile
from app.services import user_service
from app.services.errors import CareerServiceError
from app.api.v1.errors import raise_http_error

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.post("/users", response_model=UserProfile, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreateRequest):
    try:
        return user_service.register_user(name=payload.name, email=payload.email)
    except CareerServiceError as exc:
        raise_http_error(exc)


@router.get("/users/me", response_model=UserProfile)
def me(user_id: str | None = Depends(current_user_id)):
    try:
        return user_service.get_profile(user_id)
    except CareerServiceError as exc:
        raise_http_error(exc)


@router.post("/subscription/upgrade", response_model=SubscriptionResponse)
def upgrade(user_id: str | None = Depends(current_user_id)):
    try:
        user = user_service.upgrade_to_pro(user_id)
    except CareerServiceError as exc:
        raise_http_error(exc)
    return SubscriptionResponse(message="Subscription upgraded to Pro", user=user)
