"""Rendering of SectionVaultError as JSON responses."""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from ..exceptions import SectionVaultError

logger = logging.getLogger(__name__)


async def section_vault_exception_handler(request: Request, exc: SectionVaultError) -> JSONResponse:
    """Answer with the error's status and ``to_dict()`` body.

    Caller mistakes (4xx) are logged at WARNING, server failures at ERROR.
    """
    logger.log(
        logging.WARNING if exc.status_code < 500 else logging.ERROR,
        "%s %s failed with %s",
        request.method,
        request.url.path,
        exc.error_code.value,
        extra={"status_code": exc.status_code, "details": exc.details},
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
