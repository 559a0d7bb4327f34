"""Sample entries shown before a user has written anything."""
from __future__ import annotations

import random
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from .models import JournalEntry

SAMPLE_COUNT = 15

SAMPLE_BODIES = [
    "My body feels light.",
    "My shoulders are a little stiff.",
    "Relaxed and comfortable.",
    "Full of energy.",
    "A bit sleepy.",
]
SAMPLE_EMOTIONS = [
    "Filled with happiness.",
    "A little anxious about the future.",
    "A calm state of mind.",
    "Excited about what's coming.",
    "Slightly sad for no clear reason.",
]
SAMPLE_ACTIONS = [
    "Took a walk around the neighborhood.",
    "Focused on work.",
    "Talked with a friend on the phone.",
    "Read a favorite book.",
    "Tried five minutes of meditation.",
]
SAMPLE_THOUGHTS = [
    "Today was a productive day.",
    "Tomorrow will be even better.",
    "I could feel myself growing.",
    "I want to use my time better.",
    "I want to thank the people around me.",
]
SAMPLE_SUMMARIES = [
    "A calm day that refreshed both body and mind.",
    "Busy, but a fulfilling day.",
    "A little tired, but well rested for tomorrow.",
    "A stimulating day with new discoveries.",
    "Faced my feelings and found an important insight.",
]
SAMPLE_EMOTION_LABELS = [["joy"], ["anxiety"], ["calm"], ["fulfillment"], ["gratitude"], ["anticipation"]]
SAMPLE_TAGS = [
    ["work", "goals"],
    ["relationships", "friends"],
    ["self-growth", "reading"],
    ["relaxation", "hobbies"],
    ["health", "exercise"],
]


def generate_placeholder_entries(
    today: Optional[date] = None,
    rng: Optional[random.Random] = None,
    count: int = SAMPLE_COUNT,
) -> List[JournalEntry]:
    """
    Unsaved sample entries spread over recent days, newest first.
    Pass a seeded ``rng`` for reproducible output.
    """
    today = today or date.today()
    rng = rng or random.Random()

    entries = []
    for i in range(count):
        day = today - timedelta(days=i * rng.randint(1, 3))
        entries.append(
            JournalEntry(
                created_at=datetime.combine(day, time(21, 0)),
                body=rng.choice(SAMPLE_BODIES),
                emotion_text=rng.choice(SAMPLE_EMOTIONS),
                action=rng.choice(SAMPLE_ACTIONS),
                thought=rng.choice(SAMPLE_THOUGHTS),
                summary=rng.choice(SAMPLE_SUMMARIES),
                emotion_labels=list(rng.choice(SAMPLE_EMOTION_LABELS)),
                tags=list(rng.choice(SAMPLE_TAGS)),
                is_placeholder=True,
            )
        )
    entries.sort(key=lambda e: e.created_at, reverse=True)
    return entries
