# sigecob/api/errors.py
from fastapi import HTTPException, Request

from sigecob.domain.errors import ShopError


def http_error(e: ShopError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.to_dict())


def client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None
