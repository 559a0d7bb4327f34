# insights/models.py
from django.conf import settings
from django.db import models

from .gating import AnalysisRun, AnalysisStatus


class PatternAnalysis(models.Model):
    """Latest pattern-analysis run per user."""
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="pattern_analysis")
    status = models.CharField(max_length=16, choices=AnalysisStatus.choices, default=AnalysisStatus.NOT_TRIGGERED)
    result = models.JSONField(null=True, blank=True)
    error_message = models.TextField(blank=True)
    entry_count = models.PositiveIntegerField(default=0)  # size of the analysed snapshot

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"PatternAnalysis(user={self.user_id}, status={self.status})"

    def as_run(self) -> AnalysisRun:
        return AnalysisRun(self.status, self.result, self.error_message)

    def apply(self, run: AnalysisRun):
        self.status = run.status
        self.result = run.result
        self.error_message = run.error_message
