from __future__ import annotations

from datetime import UTC, date, datetime

from hypothesis import given
from hypothesis import strategies as st

from timeline_trace.day_index import build_day_index, count_by_day, events_for_day
from timeline_trace.models import Event, EventKind


def _ev(dt: datetime) -> Event:
    return Event(kind=EventKind.RAW_POINT, start=dt)


@given(
    st.lists(
        st.datetimes(
            min_value=datetime(2000, 1, 1),
            max_value=datetime(2030, 12, 31),
            timezones=st.just(UTC),
        ),
        max_size=60,
    )
)
def test_day_index_is_sorted_and_distinct(starts: list[datetime]) -> None:
    events = [_ev(dt) for dt in starts]
    index = build_day_index(events, "UTC")
    expected = sorted({dt.date() for dt in starts})

    assert list(index.days) == expected
    assert all(a < b for a, b in zip(index.days, index.days[1:]))
    assert build_day_index(list(reversed(events)), "UTC") == index


def test_membership_and_index_of() -> None:
    index = build_day_index(
        [_ev(datetime(2023, 5, 3, 1, tzinfo=UTC)), _ev(datetime(2023, 5, 1, 23, tzinfo=UTC))], "UTC"
    )
    assert date(2023, 5, 1) in index
    assert date(2023, 5, 2) not in index
    assert "2023-05-01" not in index
    assert index.index_of(date(2023, 5, 3)) == 1
    assert index.index_of(datetime(2023, 5, 3, 12)) == 1
    assert index.index_of(date(2023, 5, 2)) is None
    assert (index.first, index.last) == (date(2023, 5, 1), date(2023, 5, 3))


def test_day_is_taken_in_the_given_timezone() -> None:
    events = [_ev(datetime(2023, 5, 1, 20, tzinfo=UTC))]
    assert build_day_index(events, "UTC").days == (date(2023, 5, 1),)
    assert build_day_index(events, "Asia/Tokyo").days == (date(2023, 5, 2),)


def test_empty() -> None:
    index = build_day_index([], "UTC")
    assert len(index) == 0
    assert index.first is None


def test_events_for_day_half_open_and_sorted() -> None:
    events = [
        _ev(datetime(2023, 5, 2, 0, 0, tzinfo=UTC)),
        _ev(datetime(2023, 5, 1, 12, 0, tzinfo=UTC)),
        _ev(datetime(2023, 5, 1, 0, 0, tzinfo=UTC)),
        _ev(datetime(2023, 4, 30, 23, 59, 59, tzinfo=UTC)),
    ]
    got = events_for_day(events, date(2023, 5, 1), "UTC")
    assert [e.start.hour for e in got] == [0, 12]


def test_count_by_day() -> None:
    events = [_ev(datetime(2023, 5, 1, h, tzinfo=UTC)) for h in (1, 2, 3)] + [_ev(datetime(2023, 5, 4, tzinfo=UTC))]
    assert count_by_day(events, "UTC") == {date(2023, 5, 1): 3, date(2023, 5, 4): 1}
