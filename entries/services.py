from __future__ import annotations
import json
import logging
from typing import Any, Dict, List, Optional, Protocol

from django.conf import settings
from django.utils.module_loading import import_string
from openai import OpenAI, OpenAIError
from rest_framework import serializers

from .exceptions import MalformedProviderOutput, ProviderFailure

logger = logging.getLogger(__name__)

# Per-entry analysis: summary, 1-2 emotion labels, 3-4 tags
ENTRY_SYSTEM_INSTRUCTION = (
    "You are a gentle mindfulness journaling assistant.\n"
    "You MUST respond ONLY as valid JSON (no markdown, no explanation outside JSON).\n"
    "JSON shape:\n"
    "{\n"
    '  "summary": string,\n'
    '  "emotions": string[],\n'
    '  "tags": string[]\n'
    "}\n"
    "Rules:\n"
    "- summary: 1-2 short sentences in a positive, reflective tone.\n"
    "- emotions: the 1-2 main emotions felt, as single lowercase words "
    "(e.g. joy, gratitude, anxiety, sadness, calm).\n"
    "- tags: 3-4 keyword tags that categorize the entry (e.g. work, relationships, self-growth).\n"
    "- Do not add extra keys.\n"
)

ENTRY_FALLBACK: Dict[str, Any] = {
    "summary": "A summary could not be generated right now.",
    "emotions": ["unanalyzable"],
    "tags": [],
}


class AnalysisProvider(Protocol):
    def analyze(self, text: str, *, instructions: str = ENTRY_SYSTEM_INSTRUCTION) -> Dict[str, Any]: ...

    def complete(self, prompt: str, *, instructions: Optional[str] = None) -> str: ...

    def chat(self, messages: List[Dict[str, str]]) -> str: ...


def parse_json(text: str) -> Dict[str, Any]:
    """
    Parse the model's JSON answer. Markdown code fences are tolerated,
    anything else that is not a JSON object raises MalformedProviderOutput.
    """
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned[3:]
        if cleaned.startswith("json"):
            cleaned = cleaned[4:]
        if cleaned.endswith("```"):
            cleaned = cleaned[:-3]
        cleaned = cleaned.strip()

    try:
        data = json.loads(cleaned)
    except ValueError as e:
        raise MalformedProviderOutput(f"response is not JSON: {e}", raw=text) from e

    if not isinstance(data, dict):
        raise MalformedProviderOutput("response is not a JSON object", raw=text)
    return data


class GeminiProvider:
    """
    Gemini through its OpenAI-compatible endpoint.
    The client is created on first use so that importing this module never
    needs an API key.
    """

    def __init__(self, client: Optional[OpenAI] = None):
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not settings.GEMINI_API_KEY:
                raise ProviderFailure("GEMINI_API_KEY is not configured")
            self._client = OpenAI(
                api_key=settings.GEMINI_API_KEY,
                base_url=settings.GEMINI_BASE_URL,
                timeout=settings.GEMINI_TIMEOUT,
            )
        return self._client

    def _create(self, messages: List[Dict[str, str]], **kwargs) -> str:
        try:
            chat = self.client.chat.completions.create(
                model=settings.GEMINI_MODEL,
                messages=messages,
                **kwargs,
            )
        except OpenAIError as e:
            # rate limits, timeouts, 5xx, connection problems
            raise ProviderFailure(f"Gemini API error: {getattr(e, 'message', str(e))}") from e

        text = (chat.choices[0].message.content or "").strip() if chat.choices else ""
        if not text:
            raise ProviderFailure("empty response from Gemini API")
        return text

    def analyze(self, text: str, *, instructions: str = ENTRY_SYSTEM_INSTRUCTION) -> Dict[str, Any]:
        raw = self._create(
            [
                {"role": "system", "content": instructions},
                {"role": "user", "content": text},
            ],
            response_format={"type": "json_object"},
            temperature=0.2,
        )
        return parse_json(raw)

    def complete(self, prompt: str, *, instructions: Optional[str] = None) -> str:
        messages = []
        if instructions:
            messages.append({"role": "system", "content": instructions})
        messages.append({"role": "user", "content": prompt})
        return self._create(messages, temperature=0.7)

    def chat(self, messages: List[Dict[str, str]]) -> str:
        return self._create(messages, temperature=0.8, max_tokens=2048)


def get_provider() -> AnalysisProvider:
    return import_string(settings.ANALYSIS_PROVIDER)()


class EntryAnalysisSerializer(serializers.Serializer):
    summary = serializers.CharField()
    emotions = serializers.ListField(child=serializers.CharField(), allow_empty=True)
    tags = serializers.ListField(child=serializers.CharField(), allow_empty=True, required=False, default=list)


def analyze_entry(entry, provider: Optional[AnalysisProvider] = None) -> Dict[str, Any]:
    """
    Fill summary / emotion_labels / tags on an unsaved entry.

    Never raises for provider trouble: the fixed fallback is stored instead,
    so the user's entry is always saved.
    """
    try:
        provider = provider or get_provider()
        data = provider.analyze(entry.analysis_text())
        ser = EntryAnalysisSerializer(data=data)
        if not ser.is_valid():
            raise MalformedProviderOutput(f"unexpected analysis shape: {ser.errors}", raw=json.dumps(data)[:200])
        analysis = ser.validated_data
    except MalformedProviderOutput as e:
        logger.warning("[entry-analysis] malformed output: %s (raw=%r)", e, e.raw[:200])
        analysis = ENTRY_FALLBACK
    except ProviderFailure:
        logger.exception("[entry-analysis] provider failed")
        analysis = ENTRY_FALLBACK
    except Exception:
        logger.exception("[entry-analysis] unexpected provider error")
        analysis = ENTRY_FALLBACK

    entry.summary = analysis["summary"]
    entry.emotion_labels = list(analysis["emotions"])
    entry.tags = list(analysis.get("tags") or [])
    return analysis
