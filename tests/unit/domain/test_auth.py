"""
Unit tests for authentication domain models.
"""

from datetime import datetime, timedelta, timezone

from gardien.domain.auth import VerificationResult, to_iso_timestamp


class TestIsoTimestamp:
    """Tests for to_iso_timestamp."""

    def test_millisecond_precision_with_z(self):
        """Test rendering uses milliseconds and a Z suffix."""
        moment = datetime(2026, 10, 19, 8, 15, 30, 123456, tzinfo=timezone.utc)

        assert to_iso_timestamp(moment) == "2026-10-19T08:15:30.123Z"

    def test_naive_treated_as_utc(self):
        """Test naive datetimes are assumed to be UTC."""
        assert to_iso_timestamp(datetime(2026, 1, 2, 3, 4, 5)) == (
            "2026-01-02T03:04:05.000Z"
        )

    def test_other_timezone_converted(self):
        """Test aware datetimes are converted to UTC."""
        plus_two = timezone(timedelta(hours=2))
        moment = datetime(2026, 1, 1, 1, 0, 0, tzinfo=plus_two)

        assert to_iso_timestamp(moment) == "2025-12-31T23:00:00.000Z"


class TestVerificationResult:
    """Tests for VerificationResult."""

    def test_defaults(self):
        """Test result defaults to success with a current UTC timestamp."""
        before = datetime.now(timezone.utc)

        result = VerificationResult(address="0x" + "ab" * 20)

        assert result.success is True
        assert result.timestamp >= before
        assert result.timestamp.tzinfo is not None
        assert result.iso_timestamp.endswith("Z")
