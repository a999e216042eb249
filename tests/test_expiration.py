"""Tests for wedding site expiration rules."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from bind8.core.errors import ValidationAppError
from bind8.services.expiration import (
    WeddingExpirationInput,
    get_days_until_expiration,
    get_expiration_date,
    get_expiration_status,
    is_wedding_expired,
)

T = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
D = datetime(2025, 9, 20, 16, 0, tzinfo=timezone.utc)


def _registered(**overrides) -> dict:
    data = {"isPremium": False, "email": "x@y.com", "weddingDate": D, "createdAt": T}
    data.update(overrides)
    return data


class TestIsWeddingExpired:
    def test_absent_wedding_is_expired(self) -> None:
        assert is_wedding_expired(None) is True

    def test_premium_never_expires(self) -> None:
        assert is_wedding_expired({"isPremium": True}) is False
        assert is_wedding_expired({"isPremium": True, "createdAt": "2000-01-01"}, now=T) is False

    def test_premium_ignores_unparseable_dates(self) -> None:
        wedding = {"isPremium": True, "createdAt": "garbage", "weddingDate": "someday"}

        assert is_wedding_expired(wedding) is False
        assert get_expiration_date(wedding) is None
        assert get_days_until_expiration(wedding) is None
        assert get_expiration_status({"is_premium": True, "created_at": "garbage"}) == "Never expires"

    @pytest.mark.parametrize("hours, expired", [(23, False), (25, True)])
    def test_unregistered_site_lives_24_hours(self, hours: int, expired: bool) -> None:
        wedding = {"isPremium": False, "email": None, "createdAt": T}

        assert is_wedding_expired(wedding, now=T + timedelta(hours=hours)) is expired

    def test_empty_email_counts_as_unregistered(self) -> None:
        wedding = {"email": "", "weddingDate": D, "createdAt": T}

        assert is_wedding_expired(wedding, now=T + timedelta(hours=25)) is True

    @pytest.mark.parametrize("days, expired", [(29, False), (31, True)])
    def test_registered_site_lives_30_days_after_wedding(self, days: int, expired: bool) -> None:
        assert is_wedding_expired(_registered(), now=D + timedelta(days=days)) is expired

    def test_registered_site_without_date_lives_60_days(self) -> None:
        wedding = _registered(weddingDate=None)

        assert is_wedding_expired(wedding, now=T + timedelta(days=59)) is False
        assert is_wedding_expired(wedding, now=T + timedelta(days=61)) is True

    def test_unregistered_rule_wins_over_wedding_date(self) -> None:
        wedding = _registered(email=None)

        assert is_wedding_expired(wedding, now=T + timedelta(days=2)) is True

    def test_accepts_snake_case_and_model(self) -> None:
        model = WeddingExpirationInput(is_premium=False, email="x@y.com", wedding_date=D, created_at=T)

        assert is_wedding_expired(model, now=D + timedelta(days=31)) is True
        assert is_wedding_expired(
            {"is_premium": False, "email": "x@y.com", "wedding_date": D, "created_at": T},
            now=D + timedelta(days=29),
        ) is False


class TestValidation:
    def test_unparseable_date_raises_validation_error(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            is_wedding_expired({"email": "x@y.com", "weddingDate": "next summer", "createdAt": T})

        assert exc_info.value.code == "invalid_wedding_dates"
        assert "weddingDate" in exc_info.value.details["fields"]

    def test_missing_created_at_raises_when_needed(self) -> None:
        with pytest.raises(ValidationAppError):
            is_wedding_expired({"email": None})

    def test_missing_created_at_names_the_field(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            get_expiration_date({"email": "x@y.com"})

        assert exc_info.value.details["fields"] == ["createdAt"]

    def test_created_at_optional_when_wedding_date_decides(self) -> None:
        assert is_wedding_expired({"email": "x@y.com", "weddingDate": D}, now=D) is False

    def test_plain_dates_and_naive_datetimes_are_utc(self) -> None:
        model = WeddingExpirationInput.model_validate(
            {"email": "x@y.com", "weddingDate": date(2025, 9, 20), "createdAt": datetime(2025, 3, 1)}
        )

        assert model.wedding_date == datetime(2025, 9, 20, tzinfo=timezone.utc)
        assert model.created_at.tzinfo is timezone.utc

    def test_iso_strings_are_parsed(self) -> None:
        expires = get_expiration_date({"email": "x@y.com", "weddingDate": "2025-09-20", "createdAt": T})

        assert expires == datetime(2025, 10, 20, tzinfo=timezone.utc)


class TestExpirationDate:
    def test_none_for_absent_or_premium(self) -> None:
        assert get_expiration_date(None) is None
        assert get_expiration_date({"isPremium": True}) is None

    def test_dates_per_rule(self) -> None:
        assert get_expiration_date(_registered()) == D + timedelta(days=30)
        assert get_expiration_date(_registered(email=None, weddingDate=None)) == T + timedelta(hours=24)
        assert get_expiration_date(_registered(weddingDate=None)) == T + timedelta(days=60)

    def test_wedding_date_counts_down_before_registration(self) -> None:
        wedding = _registered(email=None)

        assert get_expiration_date(wedding) == D + timedelta(days=30)
        assert get_days_until_expiration(wedding, now=D) == 30
        assert get_expiration_status(wedding, now=D) == "Expires in 4 weeks"
        assert is_wedding_expired(wedding, now=T + timedelta(hours=25)) is True

    def test_unregistered_countdown_needs_no_created_at_when_dated(self) -> None:
        assert get_expiration_date({"email": None, "weddingDate": D}) == D + timedelta(days=30)


class TestDaysUntilExpiration:
    def test_none_for_premium(self) -> None:
        assert get_days_until_expiration({"isPremium": True}) is None
        assert get_days_until_expiration(None) is None

    def test_rounds_partial_days_up(self) -> None:
        expires = D + timedelta(days=30)

        assert get_days_until_expiration(_registered(), now=expires - timedelta(days=2, hours=3)) == 3
        assert get_days_until_expiration(_registered(), now=expires - timedelta(hours=1)) == 1

    def test_never_negative(self) -> None:
        assert get_days_until_expiration(_registered(), now=D + timedelta(days=90)) == 0


class TestExpirationStatus:
    @staticmethod
    def _status(days_left: int) -> str:
        expires = D + timedelta(days=30)
        return get_expiration_status(_registered(), now=expires - timedelta(days=days_left))

    def test_absent_and_premium(self) -> None:
        assert get_expiration_status(None) == "Expired"
        assert get_expiration_status({"isPremium": True}) == "Never expires"

    @pytest.mark.parametrize(
        "days_left, expected",
        [
            (0, "Expired"),
            (1, "Expires tomorrow"),
            (2, "Expires in 2 days"),
            (7, "Expires in 7 days"),
            (8, "Expires in 1 weeks"),
            (14, "Expires in 2 weeks"),
            (30, "Expires in 4 weeks"),
            (31, "Expires in 1 months"),
            (59, "Expires in 1 months"),
            (90, "Expires in 3 months"),
        ],
    )
    def test_thresholds(self, days_left: int, expected: str) -> None:
        assert self._status(days_left) == expected

    def test_past_expiry_reads_expired(self) -> None:
        assert get_expiration_status(_registered(), now=D + timedelta(days=45)) == "Expired"
