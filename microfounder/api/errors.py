"""
Domain error → HTTP status mapping shared by the routers.
"""

import logging

from fastapi import HTTPException, status

from ..core.errors import InferenceFailed, NoBusinessFound, UnknownAgent

logger = logging.getLogger(__name__)


def to_http(exc: Exception) -> HTTPException:
    if isinstance(exc, (UnknownAgent, NoBusinessFound)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, InferenceFailed):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    if isinstance(exc, ValueError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    logger.error("Unhandled error: %s", exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
