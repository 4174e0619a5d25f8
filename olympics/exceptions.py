"""Map domain and database failures onto API responses."""

from __future__ import annotations

import logging

from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError
from django.db.models import ProtectedError, RestrictedError
from rest_framework import exceptions, status
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class Conflict(exceptions.APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The request conflicts with existing data."
    default_code = "conflict"


class StoreUnavailable(exceptions.APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "The data store is temporarily unavailable."
    default_code = "store_unavailable"


def _validation_detail(exc: DjangoValidationError):
    if hasattr(exc, "error_dict"):
        return exc.message_dict
    return {"detail": exc.messages}


def _protected_detail(exc: ProtectedError | RestrictedError) -> str:
    blocking = getattr(exc, "protected_objects", None) or getattr(exc, "restricted_objects", ())
    blockers = sorted({str(obj._meta.verbose_name_plural) for obj in blocking})
    return f"Still referenced by {', '.join(blockers)}."


def translate_exception(exc: Exception) -> Exception:
    """Return the DRF exception that represents ``exc``."""

    if isinstance(exc, DjangoValidationError):
        return exceptions.ValidationError(_validation_detail(exc))
    if isinstance(exc, ObjectDoesNotExist):
        return exceptions.NotFound(str(exc) or None)
    if isinstance(exc, (ProtectedError, RestrictedError)):
        return Conflict(_protected_detail(exc))
    if isinstance(exc, IntegrityError):
        logger.warning("Integrity error: %s", exc)
        return Conflict()
    if isinstance(exc, DatabaseError):
        logger.exception("Database error while handling request")
        return StoreUnavailable()
    return exc


def api_exception_handler(exc, context):
    """DRF exception handler that also understands Django and ORM errors."""

    return exception_handler(translate_exception(exc), context)
