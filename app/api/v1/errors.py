from __future__ import annotations

from typing import NoReturn

from fastapi import HTTPException

from app.services.errors import CareerServiceError


def raise_http_error(exc: CareerServiceError) -> NoReturn:
    raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
