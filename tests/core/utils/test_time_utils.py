import time
from datetime import datetime, timezone

from core.utils.time import epoch_millis, http_date, to_utc_iso, utc_now_iso


class TestUtcNowIso:
    def test_returns_utc_timezone(self) -> None:
        parsed = datetime.fromisoformat(utc_now_iso())
        assert parsed.tzinfo == timezone.utc

    def test_is_close_to_current_time(self) -> None:
        before = datetime.now(timezone.utc)
        result = utc_now_iso()
        after = datetime.now(timezone.utc)

        assert before <= datetime.fromisoformat(result) <= after

    def test_iso_format_is_lexicographically_sortable(self) -> None:
        t1 = utc_now_iso()
        t2 = utc_now_iso()
        assert t1 <= t2


class TestToUtcIso:
    def test_naive_datetimes_are_treated_as_utc(self) -> None:
        assert to_utc_iso(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05+00:00"


def test_epoch_millis_tracks_wall_clock() -> None:
    assert abs(epoch_millis() - int(time.time() * 1000)) < 1000


def test_http_date() -> None:
    value = datetime(2024, 3, 5, 14, 30, 0, tzinfo=timezone.utc)
    assert http_date(value) == "Tue, 05 Mar 2024 14:30:00 GMT"
