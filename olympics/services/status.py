"""Status lifecycle for rounds and matches."""

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ValidationError

from olympics.models import Status

TERMINAL_STATUSES = frozenset({Status.COMPLETED, Status.CANCELLED})

# scheduled -> delayed <-> live -> completed; cancelled from any non-terminal state.
ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    Status.SCHEDULED: frozenset({Status.DELAYED, Status.LIVE, Status.CANCELLED}),
    Status.DELAYED: frozenset({Status.LIVE, Status.CANCELLED}),
    Status.LIVE: frozenset({Status.DELAYED, Status.COMPLETED, Status.CANCELLED}),
    Status.COMPLETED: frozenset(),
    Status.CANCELLED: frozenset(),
}


def strict_transitions_enabled() -> bool:
    return bool(getattr(settings, "OLYMPICS_STRICT_STATUS_TRANSITIONS", False))


def parse_status(value: str | None) -> str:
    """Return the status token or raise ``ValidationError`` for unknown values."""

    token = (value or "").strip().lower()
    if token not in Status.values:
        raise ValidationError(
            {"status": f"Status must be one of: {', '.join(Status.values)}."}
        )
    return token


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATUSES


def can_transition(current: str, new: str) -> bool:
    if current == new:
        return True
    return new in ALLOWED_TRANSITIONS.get(current, frozenset())


def validate_transition(current: str | None, new: str, *, strict: bool | None = None) -> str:
    """Validate a status change and return the normalised new status.

    Unknown tokens are always rejected. The transition graph is only enforced
    when strict mode is on; operators may otherwise correct a status freely.
    """

    target = parse_status(new)
    if current is None:
        return target
    if strict is None:
        strict = strict_transitions_enabled()
    if strict and not can_transition(current, target):
        raise ValidationError(
            {"status": f"Cannot change status from {current} to {target}."}
        )
    return target
