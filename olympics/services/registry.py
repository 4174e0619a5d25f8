"""Olympics activation and the single "which Olympics is active" accessor."""

from __future__ import annotations

import logging
import time

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from olympics.models import Olympics, Setting

logger = logging.getLogger(__name__)

_RETRY_BACKOFF = 0.05


def _parse_id(value, field: str = "olympics") -> int | None:
    if value in (None, ""):
        return None
    if isinstance(value, bool):
        raise ValidationError({field: "Invalid identifier."})
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise ValidationError({field: "Invalid identifier."}) from exc
    if parsed < 1:
        raise ValidationError({field: "Invalid identifier."})
    return parsed


def _activate_once(olympics_id: int) -> Olympics:
    with transaction.atomic():
        target = Olympics.objects.select_for_update().get(pk=olympics_id)
        Olympics.objects.exclude(pk=olympics_id).filter(is_active=True).update(is_active=False)
        Olympics.objects.filter(pk=olympics_id).update(is_active=True)
        Setting.put(Setting.ACTIVE_OLYMPICS_ID, str(olympics_id))
    target.is_active = True
    return target


def activate(olympics_id) -> Olympics:
    """Make ``olympics_id`` the only active Olympics.

    Deactivating every other row, flagging the target and recording the
    ``active_olympics_id`` setting happen in one transaction. The sequence is
    idempotent, so database errors replay the whole of it.

    Raises ``Olympics.DoesNotExist`` for unknown ids.
    """

    pk = _parse_id(olympics_id)
    if pk is None:
        raise ValidationError({"olympics": "An Olympics id is required."})
    attempts = max(1, int(getattr(settings, "OLYMPICS_ACTIVATION_ATTEMPTS", 3)))
    attempt = 0
    while True:
        attempt += 1
        try:
            olympics = _activate_once(pk)
        except DatabaseError as exc:
            if attempt >= attempts:
                logger.exception("Activation of olympics %s failed after %d attempts", pk, attempt)
                raise
            logger.warning(
                "Activation of olympics %s failed (attempt %d/%d): %s", pk, attempt, attempts, exc
            )
            time.sleep(_RETRY_BACKOFF * attempt)
            continue
        logger.info("Activated olympics %s (%s)", olympics.pk, olympics.name)
        return olympics


def get_active(explicit=None) -> int | None:
    """Resolve which Olympics a read should be scoped to.

    Order: explicit id, the ``active_olympics_id`` setting, the row flagged
    ``is_active``. ``None`` means there is nothing to scope to.
    """

    pk = _parse_id(explicit)
    if pk is not None:
        return pk

    stored = Setting.get_value(Setting.ACTIVE_OLYMPICS_ID)
    if stored:
        try:
            stored_pk = int(stored)
        except ValueError:
            logger.warning("Ignoring malformed %s setting: %r", Setting.ACTIVE_OLYMPICS_ID, stored)
        else:
            if Olympics.objects.filter(pk=stored_pk).exists():
                return stored_pk

    return Olympics.objects.filter(is_active=True).values_list("pk", flat=True).first()


def get_active_olympics(explicit=None) -> Olympics | None:
    pk = get_active(explicit)
    if pk is None:
        return None
    return Olympics.objects.filter(pk=pk).first()


def delete_olympics(olympics: Olympics) -> None:
    """Delete an Olympics with all of its events, rounds, matches and medals."""

    with transaction.atomic():
        was_selected = Setting.get_value(Setting.ACTIVE_OLYMPICS_ID) == str(olympics.pk)
        pk = olympics.pk
        _, removed = olympics.delete()
        if was_selected:
            Setting.objects.filter(key=Setting.ACTIVE_OLYMPICS_ID).delete()
    logger.info("Deleted olympics %s: %s", pk, removed)
