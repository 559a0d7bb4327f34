from datetime import date, datetime, timedelta
from types import SimpleNamespace

import calendar
import pytest

from entries.aggregation import (
    GRID_CELLS,
    bucket_by_date,
    calendar_date,
    entry_for_date,
    month_grid,
    sentiment_score,
    sentiment_trend,
)

pytestmark = pytest.mark.unit

TODAY = date(2026, 10, 19)


def entry(day, labels=(), name=""):
    return SimpleNamespace(created_at=datetime.combine(day, datetime.min.time()).replace(hour=21), emotion_labels=list(labels), name=name)


# ==================== Calendar ====================


@pytest.mark.parametrize("year,month", [(2026, 2), (2026, 10), (2024, 2), (2025, 8), (2026, 12), (2027, 1)])
def test_grid_always_has_42_cells(year, month):
    cells = month_grid([], year, month, today=TODAY)

    assert len(cells) == GRID_CELLS
    assert sum(c.in_month for c in cells) == calendar.monthrange(year, month)[1]


def test_grid_cells_are_consecutive_days():
    cells = month_grid([], 2026, 10, today=TODAY)
    for prev, cur in zip(cells, cells[1:]):
        assert cur.date - prev.date == timedelta(days=1)


def test_grid_pads_front_with_previous_month_sunday_first():
    # 2026-10-01 is a Thursday -> Sun..Wed of September come first
    cells = month_grid([], 2026, 10, today=TODAY)

    assert [c.date for c in cells[:4]] == [date(2026, 9, 27), date(2026, 9, 28), date(2026, 9, 29), date(2026, 9, 30)]
    assert not any(c.in_month for c in cells[:4])
    assert cells[4].date == date(2026, 10, 1)
    assert cells[-1].date == date(2026, 11, 7)


def test_grid_month_starting_on_sunday_has_no_leading_days():
    # February 2026 starts on a Sunday and needs only 4 weeks, still 42 cells
    cells = month_grid([], 2026, 2, today=TODAY)

    assert cells[0].date == date(2026, 2, 1)
    assert cells[0].in_month
    assert sum(1 for c in cells if not c.in_month) == 14


def test_grid_marks_today_only_once():
    cells = month_grid([], 2026, 10, today=TODAY)

    todays = [c for c in cells if c.is_today]
    assert len(todays) == 1
    assert todays[0].date == TODAY


def test_grid_today_outside_displayed_month():
    cells = month_grid([], 2026, 3, today=TODAY)
    assert not any(c.is_today for c in cells)


def test_grid_attaches_entries_to_cells_including_padding():
    first = entry(date(2026, 10, 5), ["joy"], "first")
    padding = entry(date(2026, 9, 28), ["calm"], "padding")

    cells = {c.date: c for c in month_grid([first, padding], 2026, 10, today=TODAY)}

    assert cells[date(2026, 10, 5)].entry is first
    assert cells[date(2026, 9, 28)].entry is padding
    assert cells[date(2026, 10, 6)].entry is None


def test_grid_rejects_invalid_month():
    with pytest.raises(ValueError):
        month_grid([], 2026, 13)


def test_bucketing_keeps_first_encountered_entry():
    day = date(2026, 10, 10)
    a = entry(day, name="a")
    b = entry(day, name="b")
    b.created_at = b.created_at + timedelta(hours=2)  # later in the day, still loses

    assert bucket_by_date([a, b])[day] is a
    assert bucket_by_date([b, a])[day] is b
    assert entry_for_date([a, b], day) is a


def test_bucketing_uses_calendar_date_only():
    late = SimpleNamespace(created_at=datetime(2026, 10, 10, 23, 59), emotion_labels=[])
    early = SimpleNamespace(created_at=datetime(2026, 10, 11, 0, 1), emotion_labels=[])

    buckets = bucket_by_date([late, early])
    assert buckets[date(2026, 10, 10)] is late
    assert buckets[date(2026, 10, 11)] is early


def test_calendar_date_rejects_none():
    with pytest.raises(TypeError):
        calendar_date(None)


# ==================== Sentiment ====================


@pytest.mark.parametrize(
    "label,score",
    [
        ("joy", 1),
        ("Gratitude", 1),
        ("sadness", -1),
        ("mild anxiety", -1),
        ("calm", 0),
        ("喜び", 1),
        ("少し不安", -1),
        ("穏やか", 0),
    ],
)
def test_sentiment_score_by_substring(label, score):
    assert sentiment_score(label) == score


def test_unknown_label_scores_zero():
    assert sentiment_score("bewildered") == 0
    assert sentiment_score("") == 0


def test_first_declared_key_wins_for_compound_labels():
    # "joy" is declared before "anxiety"
    assert sentiment_score("anxiety mixed with joy") == 1


def test_trend_has_thirty_ordered_days_ending_today():
    trend = sentiment_trend([], today=TODAY)

    assert len(trend.days) == 30
    assert trend.days[0] == TODAY - timedelta(days=29)
    assert trend.days[-1] == TODAY
    assert trend.labels[0] == "9/20"
    assert trend.labels[-1] == "10/19"


def test_trend_all_zero_without_entries():
    trend = sentiment_trend([], today=TODAY)

    assert trend.daily == [0] * 30
    assert trend.cumulative == [0] * 30
    assert trend.current == 0
    assert (trend.minimum, trend.maximum) == (0, 5)


def test_positive_and_negative_days_cancel_out():
    entries = [
        entry(TODAY - timedelta(days=29), ["joy"]),
        entry(TODAY - timedelta(days=29), ["sadness"]),
        entry(TODAY - timedelta(days=1), ["calm"]),
    ]

    trend = sentiment_trend(entries, today=TODAY)

    assert trend.daily == [0] * 30
    assert trend.cumulative[-1] == 0
    assert trend.current == 0


def test_cumulative_is_running_sum_of_daily():
    entries = [
        entry(TODAY - timedelta(days=20), ["joy", "gratitude"]),
        entry(TODAY - timedelta(days=10), ["anxiety"]),
        entry(TODAY - timedelta(days=10), ["fatigue", "bewildered"]),
        entry(TODAY, ["happy"]),
    ]

    trend = sentiment_trend(entries, today=TODAY)

    previous = 0
    for daily, cumulative in zip(trend.daily, trend.cumulative):
        assert cumulative - previous == daily
        previous = cumulative
    assert trend.daily[9] == 2
    assert trend.daily[19] == -2
    assert trend.current == 1
    assert trend.cumulative[-1] == sum(trend.daily)


def test_entries_outside_window_are_ignored():
    entries = [
        entry(TODAY - timedelta(days=30), ["joy"]),
        entry(TODAY + timedelta(days=1), ["joy"]),
        entry(TODAY - timedelta(days=29), ["sadness"]),
    ]

    trend = sentiment_trend(entries, today=TODAY)

    assert trend.daily[0] == -1
    assert sum(trend.daily) == -1


def test_display_range_follows_data():
    low = [entry(TODAY - timedelta(days=5), ["sad", "worry", "regret"])]
    high = [entry(TODAY - timedelta(days=i), ["joy", "gratitude"]) for i in range(4)]

    assert sentiment_trend(low, today=TODAY).minimum == -3
    assert sentiment_trend(low, today=TODAY).maximum == 5
    assert sentiment_trend(high, today=TODAY).maximum == 8


def test_trend_is_deterministic():
    entries = [entry(TODAY - timedelta(days=i), ["joy"] if i % 2 else ["anger"]) for i in range(40)]

    first = sentiment_trend(entries, today=TODAY)
    second = sentiment_trend(list(entries), today=TODAY)

    assert first == second
