from __future__ import annotations
import json
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from django.db import transaction
from rest_framework import serializers

from accounts.models import profile_for
from entries.exceptions import MalformedProviderOutput
from entries.models import JournalEntry
from entries.services import AnalysisProvider, get_provider

from .gating import AnalysisStatus, Readiness, check_readiness
from .models import PatternAnalysis

logger = logging.getLogger(__name__)

CONTEXT_ENTRY_LIMIT = 30
# a RUNNING row older than this is treated as abandoned (worker died mid-call)
STALE_RUN_AFTER = timedelta(minutes=5)

PATTERN_SYSTEM_INSTRUCTION = (
    "You are a psychology expert AI. Based on the user profile and the list of diary summaries, "
    "produce a multi-angle analysis.\n"
    "You MUST respond ONLY as valid JSON (no markdown, no explanation outside JSON).\n"
    "JSON shape:\n"
    "{\n"
    '  "overall_insight": string,\n'
    '  "monthly_theme": string,\n'
    '  "keywords": string[],\n'
    '  "core_values": string[],\n'
    '  "top_strengths": string[],\n'
    '  "personality_traits": { "openness": number, "conscientiousness": number, '
    '"extraversion": number, "agreeableness": number, "neuroticism": number },\n'
    '  "comprehensive_report": string,\n'
    '  "mbti_type": string,\n'
    '  "mbti_scores": { "ei": number, "sn": number, "tf": number, "jp": number }\n'
    "}\n"
    "Rules:\n"
    "- personality_traits values are integers from 0 to 100.\n"
    "- mbti_scores values are integers from -100 to 100.\n"
    "- comprehensive_report is markdown.\n"
    "- Do not add extra keys.\n"
)

REPORT_SYSTEM_INSTRUCTION = (
    "You are an AI that supports self-reflection. "
    "Write a gentle, encouraging markdown report based on the data below."
)

REPORT_TYPES = (
    "MONTHLY_THEME",
    "BIG_FIVE",
    "MBTI",
    "STRENGTHS_VALUES",
    "KEYWORDS",
    "SENTIMENT_TREND",
)


class PersonalityTraitsSerializer(serializers.Serializer):
    openness = serializers.IntegerField(min_value=0, max_value=100)
    conscientiousness = serializers.IntegerField(min_value=0, max_value=100)
    extraversion = serializers.IntegerField(min_value=0, max_value=100)
    agreeableness = serializers.IntegerField(min_value=0, max_value=100)
    neuroticism = serializers.IntegerField(min_value=0, max_value=100)


class MBTIScoresSerializer(serializers.Serializer):
    ei = serializers.IntegerField(min_value=-100, max_value=100)
    sn = serializers.IntegerField(min_value=-100, max_value=100)
    tf = serializers.IntegerField(min_value=-100, max_value=100)
    jp = serializers.IntegerField(min_value=-100, max_value=100)


class PatternAnalysisResultSerializer(serializers.Serializer):
    overall_insight = serializers.CharField()
    monthly_theme = serializers.CharField(allow_blank=True)
    keywords = serializers.ListField(child=serializers.CharField())
    core_values = serializers.ListField(child=serializers.CharField())
    top_strengths = serializers.ListField(child=serializers.CharField())
    personality_traits = PersonalityTraitsSerializer()
    comprehensive_report = serializers.CharField()
    mbti_type = serializers.CharField(allow_blank=True, max_length=4)
    mbti_scores = MBTIScoresSerializer()


def journal_summaries(entries: Sequence[JournalEntry], limit: int = CONTEXT_ENTRY_LIMIT) -> str:
    return "\n".join(f"{e.created_at:%Y-%m-%d}: {e.summary}" for e in list(entries)[:limit])


def working_set(user) -> List[JournalEntry]:
    """The user's real entries, newest first."""
    return list(JournalEntry.objects.filter(user=user, is_placeholder=False).order_by("-created_at", "-id"))


def build_pattern_prompt(entries: Sequence[JournalEntry], profile_text: str) -> str:
    return (
        f"{profile_text}\n"
        "Diary summaries:\n"
        "---\n"
        f"{journal_summaries(entries)}\n"
        "---\n\n"
        "Return the JSON only."
    )


def analyze_patterns(entries: Sequence[JournalEntry], profile_text: str, provider: AnalysisProvider) -> Dict[str, Any]:
    """One provider call; raises ProviderFailure / MalformedProviderOutput."""
    data = provider.analyze(build_pattern_prompt(entries, profile_text), instructions=PATTERN_SYSTEM_INSTRUCTION)
    ser = PatternAnalysisResultSerializer(data=data)
    if not ser.is_valid():
        raw = json.dumps(data, ensure_ascii=False)[:200]
        logger.warning("[pattern-analysis] malformed output: %s raw=%r", ser.errors, raw)
        raise MalformedProviderOutput(f"unexpected analysis shape: {ser.errors}", raw=raw)
    return ser.validated_data


def _claim_run(user, entry_count: int) -> PatternAnalysis:
    """Move the user's row to RUNNING, or raise AnalysisAlreadyRunning."""
    with transaction.atomic():
        record, _ = PatternAnalysis.objects.select_for_update().get_or_create(user=user)
        if record.status == AnalysisStatus.RUNNING and record.updated_at < datetime.now() - STALE_RUN_AFTER:
            logger.warning("[pattern-analysis] abandoned run reset user=%s", user.pk)
            record.status = AnalysisStatus.FAILED

        run = record.as_run()
        run.start()
        record.apply(run)
        record.entry_count = entry_count
        record.save()
    return record


def run_pattern_analysis(user, provider: Optional[AnalysisProvider] = None) -> Tuple[Readiness, Optional[PatternAnalysis]]:
    """
    Explicit trigger for one user.

    Returns (INSUFFICIENT_DATA, None) without touching any state when there
    are too few entries. Otherwise the terminal PatternAnalysis row.
    Provider failures end in FAILED; entries are only read.
    """
    entries = working_set(user)
    readiness = check_readiness(entries)
    if readiness is Readiness.INSUFFICIENT_DATA:
        return readiness, None

    provider = provider or get_provider()
    profile_text = profile_for(user).as_prompt()

    record = _claim_run(user, len(entries))
    run = record.as_run()
    try:
        run.execute(lambda: analyze_patterns(entries, profile_text, provider))
    finally:
        # the claimed row must never stay RUNNING
        if run.is_running:
            run.fail()
        record.apply(run)
        record.save(update_fields=["status", "result", "error_message", "updated_at"])
    return readiness, record


def current_analysis(user) -> PatternAnalysis:
    record = PatternAnalysis.objects.filter(user=user).first()
    return record or PatternAnalysis(user=user)


def build_report_prompt(report_type: str, analysis: Dict[str, Any], summaries: str, profile_text: str) -> str:
    prompt = (
        f"{profile_text}\n"
        "---\n"
        "The user's diary summaries:\n"
        f"{summaries}\n"
        "---\n"
    )
    if report_type == "MONTHLY_THEME":
        prompt += f'Write about this month\'s theme, "{analysis["monthly_theme"]}".'
    elif report_type == "BIG_FIVE":
        prompt += f"Interpret these Big Five scores: {json.dumps(analysis['personality_traits'])}."
    elif report_type == "MBTI":
        prompt += (
            f'Explain the MBTI type "{analysis["mbti_type"]}" '
            f"({json.dumps(analysis['mbti_scores'])}) for this user."
        )
    elif report_type == "STRENGTHS_VALUES":
        prompt += (
            f"Write a reflection report based on the user's strengths ({', '.join(analysis['top_strengths'])}) "
            f"and values ({', '.join(analysis['core_values'])})."
        )
    elif report_type == "KEYWORDS":
        prompt += (
            f"Interpret the user's current interests from these frequent keywords: "
            f"{', '.join(analysis['keywords'])}."
        )
    elif report_type == "SENTIMENT_TREND":
        prompt += (
            "Summarize the recent emotional trend (positive and negative shifts) "
            "and explain mood and stress tendencies in plain words."
        )
    else:
        raise ValueError(f"unknown report type: {report_type}")
    return prompt


def generate_detailed_report(user, report_type: str, analysis: Dict[str, Any], provider: Optional[AnalysisProvider] = None) -> str:
    provider = provider or get_provider()
    prompt = build_report_prompt(
        report_type,
        analysis,
        journal_summaries(working_set(user)),
        profile_for(user).as_prompt(),
    )
    return provider.complete(prompt, instructions=REPORT_SYSTEM_INSTRUCTION)
