from rest_framework import serializers

from .models import PatternAnalysis
from .services import REPORT_TYPES


class PatternAnalysisSerializer(serializers.ModelSerializer):
    class Meta:
        model = PatternAnalysis
        fields = ["status", "result", "error_message", "entry_count", "updated_at"]
        read_only_fields = fields


class ReportRequestSerializer(serializers.Serializer):
    report_type = serializers.ChoiceField(choices=REPORT_TYPES)
