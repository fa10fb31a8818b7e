from typing import Callable, Optional
import functools
import hmac
import inspect
import logging
import os

from fastapi import HTTPException
from starlette.requests import Request

logger = logging.getLogger(__name__)

API_TOKEN_ENV = "ROLESYNC_API_TOKEN"
API_TOKEN_HEADER = "X-Api-Token"


def require_operator_token(func: Callable) -> Callable:
    """Decorator that only lets requests carrying the operator token through.

    The expected token is read from `ROLESYNC_API_TOKEN` on every request
    and compared with the `X-Api-Token` header. A missing or wrong header
    raises HTTP 401, and so does an unset environment variable: operator
    endpoints stay closed until a token is configured.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        request: Optional[Request] = None
        for a in args:
            if isinstance(a, Request):
                request = a
                break
        if not request:
            request = kwargs.get('request')
        if not request:
            logger.warning('Operator access denied: missing request')
            raise HTTPException(status_code=401, detail={'error': 'access_denied', 'message': 'Missing request.'})

        expected = os.environ.get(API_TOKEN_ENV)
        if not expected:
            logger.warning('Operator access denied: %s is not set path=%s', API_TOKEN_ENV, request.url.path)
            raise HTTPException(status_code=401, detail={'error': 'access_denied', 'message': 'Operator token not configured.'})

        supplied = request.headers.get(API_TOKEN_HEADER, '')
        if not hmac.compare_digest(supplied.encode(), expected.encode()):
            logger.warning('Operator access denied (bad token) path=%s', request.url.path)
            raise HTTPException(status_code=401, detail={'error': 'access_denied', 'message': 'Operator token required.'})

        return await func(*args, **kwargs)

    wrapper.__signature__ = inspect.signature(func)  # preserve signature for FastAPI
    return wrapper
