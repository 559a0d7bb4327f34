# entries/serializers.py
from rest_framework import serializers
from .models import JournalEntry
from .services import analyze_entry

FORM_FIELDS = ("body", "emotion_text", "action", "thought")


class EntryCreateSerializer(serializers.ModelSerializer):
    created_at = serializers.DateTimeField(required=False)

    class Meta:
        model = JournalEntry
        fields = ["id", "created_at", "body", "emotion_text", "action", "thought", "image"]

    def validate(self, attrs):
        if not any((attrs.get(name) or "").strip() for name in FORM_FIELDS):
            raise serializers.ValidationError({
                "detail": "Write at least one of body, emotion, action or thought.",
            })
        return attrs

    def create(self, validated_data):
        entry = JournalEntry(**validated_data)
        # analysis runs before the first save; entries are not edited afterwards
        analyze_entry(entry, provider=self.context.get("provider"))
        entry.save()
        return entry


class EntryDetailSerializer(serializers.ModelSerializer):
    class Meta:
        model = JournalEntry
        fields = [
            "id", "created_at", "body", "emotion_text", "action", "thought", "image",
            "summary", "emotion_labels", "tags", "chat_report", "is_placeholder",
        ]
        read_only_fields = fields


class EntryListSerializer(serializers.ModelSerializer):
    class Meta:
        model = JournalEntry
        fields = ["id", "created_at", "summary", "emotion_labels", "tags", "is_placeholder"]


class ChatReportSerializer(serializers.Serializer):
    chat_report = serializers.CharField()


class CalendarCellSerializer(serializers.Serializer):
    date = serializers.DateField()
    day = serializers.IntegerField()
    in_month = serializers.BooleanField()
    is_today = serializers.BooleanField()
    entry = EntryListSerializer(allow_null=True)


class SentimentTrendSerializer(serializers.Serializer):
    labels = serializers.ListField(child=serializers.CharField())
    daily = serializers.ListField(child=serializers.IntegerField())
    cumulative = serializers.ListField(child=serializers.IntegerField())
    current = serializers.IntegerField()
    minimum = serializers.IntegerField()
    maximum = serializers.IntegerField()
