"""Entry Store endpoints: CRUD, calendar, by-date, sentiment, samples."""
from datetime import date, datetime, timedelta
from unittest.mock import patch

import pytest
from django.db import DatabaseError

from entries.models import JournalEntry
from entries.exceptions import ProviderFailure
from tests.conftest import client_for

pytestmark = pytest.mark.django_db

FORM = {
    "body": "Shoulders a little stiff.",
    "emotion_text": "Calm, slightly tired.",
    "action": "Walked by the river.",
    "thought": "Tomorrow will be fine.",
}


# ==================== create ====================


def test_create_runs_analysis_and_saves(api, user, provider):
    res = api.post("/api/entries/", FORM)

    assert res.status_code == 201
    assert res.data["summary"] == "A quiet, good day."
    assert res.data["emotion_labels"] == ["joy"]
    assert res.data["is_placeholder"] is False
    entry = JournalEntry.objects.get(pk=res.data["id"])
    assert entry.user == user
    assert entry.tags == ["walk", "rest"]
    assert [kind for kind, _ in provider.calls] == ["entry"]


def test_create_keeps_entry_when_analysis_fails(api, provider):
    provider.error = ProviderFailure("quota exceeded")

    res = api.post("/api/entries/", FORM)

    assert res.status_code == 201
    assert res.data["emotion_labels"] == ["unanalyzable"]
    assert JournalEntry.objects.count() == 1


def test_create_keeps_entry_on_unexpected_provider_error(api, provider):
    provider.error = RuntimeError("connection reset")

    res = api.post("/api/entries/", FORM)

    assert res.status_code == 201
    assert res.data["emotion_labels"] == ["unanalyzable"]
    assert JournalEntry.objects.count() == 1


def test_create_accepts_explicit_timestamp(api):
    res = api.post("/api/entries/", {**FORM, "created_at": "2026-10-01T08:30:00"})

    assert res.status_code == 201
    assert JournalEntry.objects.get(pk=res.data["id"]).created_at == datetime(2026, 10, 1, 8, 30)


def test_create_requires_some_text(api, provider):
    res = api.post("/api/entries/", {"body": "  ", "thought": ""})

    assert res.status_code == 400
    assert provider.calls == []


def test_create_reports_store_failure(api):
    with patch.object(JournalEntry, "save", side_effect=DatabaseError("disk full")):
        res = api.post("/api/entries/", FORM)

    assert res.status_code == 503
    assert res.data["detail"]
    assert JournalEntry.objects.count() == 0


def test_requires_authentication(client):
    assert client.get("/api/entries/").status_code == 401


# ==================== read / delete ====================


def test_list_is_newest_first_and_scoped_to_user(api, make_entry, other_user):
    old = make_entry(date(2026, 10, 1), ["calm"])
    new = make_entry(date(2026, 10, 3), ["joy"])
    make_entry(date(2026, 10, 2), ["sad"], owner=other_user)

    res = api.get("/api/entries/")

    assert res.status_code == 200
    assert [row["id"] for row in res.data] == [new.id, old.id]


def test_cannot_read_someone_elses_entry(api, make_entry, other_user):
    theirs = make_entry(date(2026, 10, 2), owner=other_user)
    assert api.get(f"/api/entries/{theirs.id}/").status_code == 404


def test_entries_are_not_editable(api, make_entry):
    entry = make_entry(date(2026, 10, 2), ["joy"])
    res = api.patch(f"/api/entries/{entry.id}/", {"summary": "changed"})

    assert res.status_code == 405
    entry.refresh_from_db()
    assert entry.summary == "summary"


def test_delete(api, make_entry):
    entry = make_entry(date(2026, 10, 2))

    assert api.delete(f"/api/entries/{entry.id}/").status_code == 204
    assert not JournalEntry.objects.filter(pk=entry.id).exists()


def test_failed_delete_keeps_entry_visible(api, make_entry):
    entry = make_entry(date(2026, 10, 2))

    with patch.object(JournalEntry, "delete", side_effect=DatabaseError("locked")):
        res = api.delete(f"/api/entries/{entry.id}/")

    assert res.status_code == 503
    assert res.data["detail"] == "The entry could not be deleted. Please try again."
    assert [row["id"] for row in api.get("/api/entries/").data] == [entry.id]


def test_attach_chat_report(api, make_entry):
    entry = make_entry(date(2026, 10, 2))

    res = api.post(f"/api/entries/{entry.id}/chat-report/", {"chat_report": "### Theme\nrest"})

    assert res.status_code == 200
    entry.refresh_from_db()
    assert entry.chat_report == "### Theme\nrest"


# ==================== calendar ====================


def test_calendar_month_grid(api, make_entry):
    make_entry(date(2026, 10, 5), ["joy"], summary="first of the day")
    make_entry(datetime(2026, 10, 5, 7, 0), ["sad"], summary="morning")
    make_entry(date(2026, 9, 28), ["calm"])

    res = api.get("/api/entries/calendar/", {"month": "2026-10"})

    assert res.status_code == 200
    cells = res.data["cells"]
    assert len(cells) == 42
    assert sum(c["in_month"] for c in cells) == 31
    by_date = {c["date"]: c for c in cells}
    # list order is newest first, so the 20:00 entry represents the day
    assert by_date["2026-10-05"]["entry"]["summary"] == "first of the day"
    assert by_date["2026-09-28"]["entry"] is not None
    assert by_date["2026-09-28"]["in_month"] is False
    assert by_date["2026-10-06"]["entry"] is None


def test_calendar_defaults_to_current_month(api):
    today = date.today()
    res = api.get("/api/entries/calendar/")

    assert (res.data["year"], res.data["month"]) == (today.year, today.month)
    assert [c["date"] for c in res.data["cells"] if c["is_today"]] == [today.isoformat()]


@pytest.mark.parametrize("month", ["2026-13", "october", "2026", "0000-05", "0001-01", "9999-12"])
def test_calendar_rejects_bad_month(api, month):
    res = api.get("/api/entries/calendar/", {"month": month})
    assert res.status_code == 400


def test_by_date(api, make_entry):
    entry = make_entry(date(2026, 10, 5), ["joy"])

    hit = api.get("/api/entries/by-date/", {"date": "2026-10-05"})
    miss = api.get("/api/entries/by-date/", {"date": "2026-10-06"})

    assert hit.data == {"exists": True, "entry": hit.data["entry"]}
    assert hit.data["entry"]["id"] == entry.id
    assert miss.data == {"exists": False}
    assert api.get("/api/entries/by-date/").status_code == 400
    assert api.get("/api/entries/by-date/", {"date": "05/10/2026"}).status_code == 400


# ==================== sentiment ====================


def test_sentiment_trend(api, make_entry):
    today = date.today()
    make_entry(today - timedelta(days=29), ["joy"])
    make_entry(today - timedelta(days=29), ["sadness"])
    make_entry(today - timedelta(days=1), ["calm"])
    make_entry(today, ["gratitude", "anxiety", "happy"])
    make_entry(today - timedelta(days=45), ["joy"])

    res = api.get("/api/entries/sentiment/")

    assert res.status_code == 200
    assert res.data["has_data"] is True
    assert len(res.data["labels"]) == 30
    assert res.data["labels"][-1] == f"{today.month}/{today.day}"
    assert res.data["daily"] == [0] * 29 + [1]
    assert res.data["cumulative"][-1] == 1
    assert res.data["current"] == 1
    assert (res.data["minimum"], res.data["maximum"]) == (0, 5)


def test_sentiment_without_entries(api):
    res = api.get("/api/entries/sentiment/")

    assert res.data["has_data"] is False
    assert res.data["current"] == 0


# ==================== samples ====================


def test_samples_are_not_persisted(api):
    res = api.get("/api/entries/samples/")

    assert res.status_code == 200
    assert len(res.data) == 15
    assert all(row["is_placeholder"] for row in res.data)
    assert all(row["id"] is None for row in res.data)
    assert JournalEntry.objects.count() == 0


def test_other_user_sees_own_calendar(make_entry, other_user):
    make_entry(date(2026, 10, 5), ["joy"])

    res = client_for(other_user).get("/api/entries/calendar/", {"month": "2026-10"})

    assert all(c["entry"] is None for c in res.data["cells"])
