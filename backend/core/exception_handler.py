from __future__ import annotations

import logging

from django.db import DatabaseError
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

from .errors import BackendFailure, BillingError

logger = logging.getLogger(__name__)


def _view_name(context) -> str:
    view = context.get("view")
    return type(view).__name__ if view is not None else "unknown view"


def billing_exception_handler(exc, context):
    """
    DRF exception handler that renders service-layer errors with the same
    {'detail': ...} shape DRF uses for its own exceptions. Database errors
    surface as a BackendFailure instead of an HTML 500 page.
    """
    if isinstance(exc, DatabaseError):
        logger.exception("Database error in %s", _view_name(context))
        set_rollback()
        exc = BackendFailure(str(exc) or None)
        return Response({"detail": exc.detail}, status=exc.status_code)
    if isinstance(exc, BackendFailure):
        logger.error("BackendFailure in %s: %s", _view_name(context), exc.detail)
        return Response({"detail": exc.detail}, status=exc.status_code)
    if isinstance(exc, BillingError):
        logger.info("%s in %s: %s", type(exc).__name__, _view_name(context), exc.detail)
        return Response({"detail": exc.detail}, status=exc.status_code)
    return exception_handler(exc, context)
