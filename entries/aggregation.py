"""
Pure derivations over a snapshot of journal entries.

Everything here works on any object exposing ``created_at`` (date or datetime)
and ``emotion_labels`` (list of str), so model instances and plain test doubles
are both fine. No function touches the database or mutates its input.
"""
from __future__ import annotations

import calendar as py_calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from itertools import accumulate
from typing import Any, Dict, Iterable, List, Optional

GRID_CELLS = 42  # 6 weeks x 7 days
TREND_WINDOW_DAYS = 30

# Declaration order matters: the first key contained in a label decides its score.
SENTIMENT_SCORES: Dict[str, int] = {
    # positive
    "joy": 1,
    "gratitude": 1,
    "fulfillment": 1,
    "anticipation": 1,
    "happy": 1,
    "relief": 1,
    "喜び": 1,
    "感謝": 1,
    "充実感": 1,
    "期待": 1,
    "嬉しい": 1,
    "楽しい": 1,
    "幸せ": 1,
    "安心": 1,
    # negative
    "anxiety": -1,
    "sad": -1,
    "anger": -1,
    "irritation": -1,
    "fatigue": -1,
    "worry": -1,
    "regret": -1,
    "不安": -1,
    "悲しい": -1,
    "怒り": -1,
    "イライラ": -1,
    "疲れ": -1,
    "心配": -1,
    "後悔": -1,
    # neutral
    "calm": 0,
    "ordinary": 0,
    "relaxed": 0,
    "穏やか": 0,
    "普通": 0,
    "リラックス": 0,
}


@dataclass(frozen=True)
class CalendarCell:
    date: date
    day: int
    in_month: bool
    is_today: bool
    entry: Optional[Any] = None


@dataclass(frozen=True)
class SentimentTrend:
    days: List[date]
    labels: List[str]
    daily: List[int]
    cumulative: List[int]

    @property
    def current(self) -> int:
        return self.cumulative[-1] if self.cumulative else 0

    @property
    def minimum(self) -> int:
        return min([0, *self.cumulative])

    @property
    def maximum(self) -> int:
        return max([5, *self.cumulative])


def calendar_date(value) -> date:
    """Calendar-date part of a timestamp. A None here is a caller bug."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"expected date or datetime, got {type(value).__name__}")


# ---------------------------------------------------------------------------
# calendar bucketing
# ---------------------------------------------------------------------------

def bucket_by_date(entries: Iterable[Any]) -> Dict[date, Any]:
    """Map each calendar date to the first entry seen for it (input order)."""
    buckets: Dict[date, Any] = {}
    for entry in entries:
        buckets.setdefault(calendar_date(entry.created_at), entry)
    return buckets


def entry_for_date(entries: Iterable[Any], day: date) -> Optional[Any]:
    return bucket_by_date(entries).get(day)


def month_grid(entries: Iterable[Any], year: int, month: int, today: Optional[date] = None) -> List[CalendarCell]:
    """
    42 cells for a Sunday-first month view: trailing days of the previous
    month, the whole month, then leading days of the next month.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"month must be 1..12, got {month}")

    today = today or date.today()
    # monthrange -> (weekday_of_first with Monday=0, number_of_days)
    monday_based, _days_in_month = py_calendar.monthrange(year, month)
    leading = (monday_based + 1) % 7
    start = date(year, month, 1) - timedelta(days=leading)

    buckets = bucket_by_date(entries)
    cells = []
    for offset in range(GRID_CELLS):
        day = start + timedelta(days=offset)
        cells.append(
            CalendarCell(
                date=day,
                day=day.day,
                in_month=(day.year, day.month) == (year, month),
                is_today=day == today,
                entry=buckets.get(day),
            )
        )
    return cells


# ---------------------------------------------------------------------------
# sentiment
# ---------------------------------------------------------------------------

def sentiment_score(label: str) -> int:
    lowered = label.lower()
    for key, score in SENTIMENT_SCORES.items():
        if key in lowered:
            return score
    return 0


def entry_score(entry: Any) -> int:
    return sum(sentiment_score(label) for label in entry.emotion_labels)


def sentiment_trend(entries: Iterable[Any], today: Optional[date] = None, days: int = TREND_WINDOW_DAYS) -> SentimentTrend:
    """Daily scores over the trailing window ending today, plus their running sum."""
    today = today or date.today()
    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]

    daily_scores: Dict[date, int] = dict.fromkeys(window, 0)
    for entry in entries:
        day = calendar_date(entry.created_at)
        if day in daily_scores:
            daily_scores[day] += entry_score(entry)

    daily = [daily_scores[day] for day in window]
    return SentimentTrend(
        days=window,
        labels=[f"{day.month}/{day.day}" for day in window],
        daily=daily,
        cumulative=list(accumulate(daily)),
    )
