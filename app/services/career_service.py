from __future__ import annotations

import json
import logging

from app.schemas.users import OnboardingResponse
from app.services.career_ai import onboarding_careers
from app.services.errors import InvalidInputError
from app.services.user_service import require_user
from app.store import records

logger = logging.getLogger(__name__)


async def onboard(user_id: str | None, *, interest: str, hobby: str, education: str) -> OnboardingResponse:
    interest, hobby, education = (interest or "").strip(), (hobby or "").strip(), (education or "").strip()
    if not interest or not hobby or not education:
        raise InvalidInputError("interest, hobby and education are required.")

    user = require_user(user_id)
    careers = await onboarding_careers(interest, hobby, education)
    records.save_onboarding(user["id"], interest=interest, hobby=hobby, education=education)
    logger.info(
        json.dumps(
            {
                "event": "onboarding_completed",
                "user_id": user["id"],
                "titles": [c.title for c in careers],
            }
        )
    )
    return OnboardingResponse(careers=careers)
