"""Tests for license validity and the grace period."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from loro.db.models import License
from loro.licensing.service import GRACE_PERIOD_DAYS, evaluate_license

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def _license(status: str = "active", valid_until: datetime | None = None) -> License:
    return License(organisation_id=1, plan="enterprise", status=status, valid_until=valid_until)


class TestEvaluateLicense:
    def test_active_within_term(self) -> None:
        lic = _license(valid_until=NOW + timedelta(days=30))
        assert evaluate_license(lic, NOW) is True
        assert lic.status == "active"
        assert lic.last_validated == NOW

    def test_perpetual(self) -> None:
        assert evaluate_license(_license(valid_until=None), NOW) is True

    def test_suspended_never_valid(self) -> None:
        assert evaluate_license(_license("suspended", NOW + timedelta(days=30)), NOW) is False

    def test_enters_grace_period(self) -> None:
        lic = _license(valid_until=NOW - timedelta(days=3))
        assert evaluate_license(lic, NOW) is True
        assert lic.status == "grace_period"

    def test_expires_after_grace(self) -> None:
        lic = _license(valid_until=NOW - timedelta(days=GRACE_PERIOD_DAYS + 1))
        assert evaluate_license(lic, NOW) is False
        assert lic.status == "expired"

    def test_naive_timestamps_treated_as_utc(self) -> None:
        lic = _license(valid_until=(NOW + timedelta(hours=1)).replace(tzinfo=None))
        assert evaluate_license(lic, NOW) is True

    def test_trial_requires_end_date(self) -> None:
        assert evaluate_license(_license("trial", None), NOW) is False
        assert evaluate_license(_license("trial", NOW + timedelta(days=7)), NOW) is True
