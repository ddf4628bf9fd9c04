# common/api.py

"""
API ERROR NORMALIZATION

Shape (all domain failures):
    {"error": {"code": "...", "message": "..."}}

Mapping:
- CommerceError subclasses -> their own code/http_status
- django.db.OperationalError (lock timeout, serialization failure,
  dropped connection) -> RETRY / 503
- anything else -> DRF default handler
"""

from __future__ import annotations

import logging

from django.db import OperationalError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from common.exceptions import CommerceError, RetryableError

logger = logging.getLogger(__name__)


def error_response(*, code: str, message: str, http_status: int):
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


def domain_exception_handler(exc, context):
    if isinstance(exc, CommerceError):
        if exc.http_status >= 500:
            logger.warning("Retryable failure", extra={"code": exc.code})
        return error_response(
            code=exc.code,
            message=exc.message,
            http_status=exc.http_status,
        )

    if isinstance(exc, OperationalError):
        logger.warning("Database operational error", exc_info=exc)
        retry = RetryableError()
        return error_response(
            code=retry.code,
            message=retry.message,
            http_status=retry.http_status,
        )

    return exception_handler(exc, context)
