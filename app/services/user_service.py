from __future__ import annotations

import json
import logging
from typing import Any

from app.schemas.users import UserProfile
from app.services.errors import InvalidInputError, UserNotFoundError
from app.store import records

logger = logging.getLogger(__name__)


def require_user(user_id: str | None) -> dict[str, Any]:
    if not user_id:
        raise UserNotFoundError("X-User-Id header is required")
    user = records.get_user(user_id)
    if user is None:
        raise UserNotFoundError()
    return user


def register_user(*, name: str, email: str) -> UserProfile:
    try:
        user = records.create_user(name=name.strip(), email=email)
    except records.DuplicateEmailError as exc:
        raise InvalidInputError("Email already used") from exc
    logger.info(json.dumps({"event": "user_registered", "user_id": user["id"]}))
    return UserProfile(**user)


def get_profile(user_id: str | None) -> UserProfile:
    return UserProfile(**require_user(user_id))


def upgrade_to_pro(user_id: str | None) -> UserProfile:
    user = require_user(user_id)
    records.set_plan(user["id"], "pro")
    logger.info(json.dumps({"event": "user_upgraded", "user_id": user["id"], "plan": "pro"}))
    return UserProfile(**require_user(user["id"]))
