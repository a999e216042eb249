"""Wedding site expiration rules.

Free sites are temporary:

- premium sites never expire;
- sites nobody registered (no contact email) expire 24 hours after creation;
- registered sites expire 30 days after the wedding date;
- registered sites without a wedding date expire 60 days after creation.

The countdown helpers (``get_expiration_date`` and the functions built on it)
read the wedding date before the registration state, so an unregistered site
that already has a wedding date counts down to ``wedding_date + 30d`` even
though ``is_wedding_expired`` applies the 24 hour rule to it.

All functions accept either a ``WeddingExpirationInput`` or any mapping with
the same fields (snake_case or camelCase) and an optional ``now`` for
deterministic evaluation. Premium input short-circuits before any date is
looked at.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from bind8.core.errors import ValidationAppError

UNREGISTERED_TTL = timedelta(hours=24)
POST_WEDDING_TTL = timedelta(days=30)
UNDATED_TTL = timedelta(days=60)


class WeddingExpirationInput(BaseModel):
    """The slice of a wedding record that drives expiration."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    is_premium: bool = Field(False, alias="isPremium")
    email: str | None = None
    wedding_date: datetime | None = Field(None, alias="weddingDate")
    created_at: datetime | None = Field(None, alias="createdAt")

    @field_validator("wedding_date", "created_at", mode="before")
    @classmethod
    def _accept_plain_dates(cls, value: Any) -> Any:
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
        if value == "":
            return None
        return value

    @field_validator("wedding_date", "created_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def is_registered(self) -> bool:
        return bool(self.email)


WeddingLike = WeddingExpirationInput | Mapping[str, Any]


def _is_premium(wedding: WeddingLike) -> bool:
    if isinstance(wedding, WeddingExpirationInput):
        return wedding.is_premium
    return bool(wedding.get("isPremium", wedding.get("is_premium", False)))


def coerce_wedding(wedding: WeddingLike | None) -> WeddingExpirationInput | None:
    """Validate loosely-typed wedding data.

    Raises:
        ValidationAppError: If a date cannot be parsed.
    """
    if wedding is None or isinstance(wedding, WeddingExpirationInput):
        return wedding
    try:
        return WeddingExpirationInput.model_validate(dict(wedding))
    except ValidationError as exc:
        fields = [".".join(str(p) for p in err["loc"]) or "wedding" for err in exc.errors()]
        raise ValidationAppError(
            code="invalid_wedding_dates",
            message="Wedding expiration data is invalid: "
            + "; ".join(err["msg"] for err in exc.errors()),
            details={"fields": fields},
        ) from exc


def _created_plus(data: WeddingExpirationInput, ttl: timedelta) -> datetime:
    if data.created_at is None:
        raise ValidationAppError(
            code="invalid_wedding_dates",
            message="Wedding expiration data is invalid: createdAt is required",
            details={"fields": ["createdAt"]},
        )
    return data.created_at + ttl


def _now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    return now if now.tzinfo else now.replace(tzinfo=timezone.utc)


def is_wedding_expired(wedding: WeddingLike | None, *, now: datetime | None = None) -> bool:
    if wedding is None:
        return True
    if _is_premium(wedding):
        return False

    data = coerce_wedding(wedding)
    if not data.is_registered:
        expires_at = _created_plus(data, UNREGISTERED_TTL)
    elif data.wedding_date is not None:
        expires_at = data.wedding_date + POST_WEDDING_TTL
    else:
        expires_at = _created_plus(data, UNDATED_TTL)
    return _now(now) > expires_at


def get_expiration_date(wedding: WeddingLike | None) -> datetime | None:
    """When the site's countdown ends; ``None`` for premium or absent sites."""
    if wedding is None or _is_premium(wedding):
        return None

    data = coerce_wedding(wedding)
    if data.wedding_date is not None:
        return data.wedding_date + POST_WEDDING_TTL
    if not data.is_registered:
        return _created_plus(data, UNREGISTERED_TTL)
    return _created_plus(data, UNDATED_TTL)


def get_days_until_expiration(wedding: WeddingLike | None, *, now: datetime | None = None) -> int | None:
    """Whole days left, rounded up and never negative; ``None`` if it never expires."""
    expires_at = get_expiration_date(wedding)
    if expires_at is None:
        return None
    days = math.ceil((expires_at - _now(now)).total_seconds() / 86400)
    return max(days, 0)


def get_expiration_status(wedding: WeddingLike | None, *, now: datetime | None = None) -> str:
    """Human-readable countdown shown on the couple's dashboard."""
    if wedding is None:
        return "Expired"
    if _is_premium(wedding):
        return "Never expires"

    days_left = get_days_until_expiration(wedding, now=now)
    if not days_left:
        return "Expired"
    if days_left == 1:
        return "Expires tomorrow"
    if days_left <= 7:
        return f"Expires in {days_left} days"
    if days_left <= 30:
        return f"Expires in {days_left // 7} weeks"
    return f"Expires in {days_left // 30} months"
