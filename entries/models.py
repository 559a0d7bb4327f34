# entries/models.py
from django.conf import settings
from django.db import models
from datetime import datetime


class JournalEntry(models.Model):
    """One Body/Emotion/Action/Thought diary record, enriched once by AI analysis."""

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="journal_entries")
    created_at = models.DateTimeField(default=datetime.now)  # local wall clock (USE_TZ=False)

    body = models.TextField(blank=True)
    emotion_text = models.TextField(blank=True)
    action = models.TextField(blank=True)
    thought = models.TextField(blank=True)
    image = models.TextField(blank=True)  # URL or data URI

    # filled by the analysis provider right after creation
    summary = models.TextField(blank=True)
    emotion_labels = models.JSONField(default=list, blank=True)
    tags = models.JSONField(default=list, blank=True)

    chat_report = models.TextField(blank=True)
    is_placeholder = models.BooleanField(default=False)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"[{self.created_at:%Y-%m-%d}] {self.summary[:30] or '(no summary)'} (user={self.user_id})"

    def analysis_text(self) -> str:
        return (
            f"Body: {self.body}\n"
            f"Emotion: {self.emotion_text}\n"
            f"Action: {self.action}\n"
            f"Thought: {self.thought}\n"
        )
