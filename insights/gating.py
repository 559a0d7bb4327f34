"""
When may the AI look at the whole journal, and what state is that run in.

Per-entry analysis always runs on save. Pattern analysis over many entries
needs MIN_ENTRIES_FOR_ANALYSIS entries and an explicit trigger:

    NOT_TRIGGERED -> RUNNING -> SUCCEEDED(result) | FAILED(message)

A new trigger from SUCCEEDED or FAILED starts over at RUNNING. Triggering
while RUNNING is refused.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence

from django.db import models

from entries.exceptions import ProviderFailure

logger = logging.getLogger(__name__)

MIN_ENTRIES_FOR_ANALYSIS = 3

INSUFFICIENT_DATA_MESSAGE = (
    "There is not enough data to analyze yet. "
    "Write 3 or more journal entries to unlock a detailed analysis."
)
ANALYSIS_FAILED_MESSAGE = (
    "The AI analysis could not be completed. Please try again later."
)


class Readiness(str, Enum):
    READY = "ready"
    INSUFFICIENT_DATA = "insufficient_data"


class AnalysisStatus(models.TextChoices):
    NOT_TRIGGERED = "NOT_TRIGGERED", "Not triggered"
    RUNNING = "RUNNING", "Running"
    SUCCEEDED = "SUCCEEDED", "Succeeded"
    FAILED = "FAILED", "Failed"


class AnalysisAlreadyRunning(Exception):
    pass


def check_readiness(entries: Sequence[Any]) -> Readiness:
    if len(entries) < MIN_ENTRIES_FOR_ANALYSIS:
        return Readiness.INSUFFICIENT_DATA
    return Readiness.READY


def insufficient_data_result() -> Dict[str, Any]:
    """Same shape as a real analysis, with explanatory copy and zeroed scores."""
    return {
        "keywords": [],
        "core_values": [],
        "overall_insight": INSUFFICIENT_DATA_MESSAGE,
        "monthly_theme": "",
        "personality_traits": {
            "openness": 0,
            "conscientiousness": 0,
            "extraversion": 0,
            "agreeableness": 0,
            "neuroticism": 0,
        },
        "top_strengths": [],
        "comprehensive_report": f"### Report\n{INSUFFICIENT_DATA_MESSAGE}",
        "mbti_type": "",
        "mbti_scores": {"ei": 0, "sn": 0, "tf": 0, "jp": 0},
    }


class AnalysisRun:
    """In-memory state of one user's pattern analysis."""

    def __init__(
        self,
        status: str = AnalysisStatus.NOT_TRIGGERED,
        result: Optional[Dict[str, Any]] = None,
        error_message: str = "",
    ):
        self.status = AnalysisStatus(status)
        self.result = result
        self.error_message = error_message

    def __repr__(self):
        return f"AnalysisRun(status={self.status.value})"

    @property
    def is_running(self) -> bool:
        return self.status == AnalysisStatus.RUNNING

    def start(self) -> None:
        if self.is_running:
            raise AnalysisAlreadyRunning("analysis is already running")
        self.status = AnalysisStatus.RUNNING
        self.result = None
        self.error_message = ""

    def succeed(self, result: Dict[str, Any]) -> None:
        self.status = AnalysisStatus.SUCCEEDED
        self.result = result
        self.error_message = ""

    def fail(self, message: str = ANALYSIS_FAILED_MESSAGE) -> None:
        self.status = AnalysisStatus.FAILED
        self.result = None
        self.error_message = message

    def execute(self, analyze: Callable[[], Dict[str, Any]]) -> None:
        """Run the provider call for an already started run."""
        try:
            result = analyze()
        except ProviderFailure:
            logger.exception("[pattern-analysis] provider failed")
            self.fail()
        except Exception:
            logger.exception("[pattern-analysis] unexpected provider error")
            self.fail()
        else:
            self.succeed(result)

    def trigger(self, entries: Sequence[Any], analyze: Callable[[Sequence[Any]], Dict[str, Any]]) -> Readiness:
        """
        Explicit user request. Below the threshold nothing changes and the
        provider is not called; the caller shows insufficient_data_result().
        """
        readiness = check_readiness(entries)
        if readiness is Readiness.INSUFFICIENT_DATA:
            return readiness
        self.start()
        self.execute(lambda: analyze(entries))
        return readiness
