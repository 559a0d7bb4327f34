from datetime import datetime, time

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from accounts.models import profile_for
from accounts.security.app_jwt import issue_app_jwt
from entries.models import JournalEntry
from tests import fakes


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: pure functions, no database")


@pytest.fixture(autouse=True)
def provider(settings):
    """Every test talks to the fake provider, never to the network."""
    fake = fakes.FakeProvider()
    fakes.install(fake)
    settings.ANALYSIS_PROVIDER = "tests.fakes.active_provider"
    yield fake
    fakes.install(None)


@pytest.fixture
def user(db):
    return get_user_model().objects.create_user(username="hana@example.com", email="hana@example.com", password="calm-mind-123")


@pytest.fixture
def other_user(db):
    return get_user_model().objects.create_user(username="other@example.com", email="other@example.com", password="calm-mind-123")


def client_for(user):
    client = APIClient()
    token = issue_app_jwt(user.id, profile_for(user).token_version)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


@pytest.fixture
def api(user):
    return client_for(user)


@pytest.fixture
def make_entry(user):
    """Persist an already-analysed entry on a given day."""

    def _make(day, labels=(), owner=None, summary="summary", **fields):
        created_at = day if isinstance(day, datetime) else datetime.combine(day, time(20, 0))
        return JournalEntry.objects.create(
            user=owner or user,
            created_at=created_at,
            body=fields.pop("body", "walked by the river"),
            summary=summary,
            emotion_labels=list(labels),
            **fields,
        )

    return _make
