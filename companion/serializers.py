from rest_framework import serializers

from .services import MIN_MESSAGES_FOR_REPORT


class ChatMessageSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=["user", "model"])
    content = serializers.CharField()


class ChatRequestSerializer(serializers.Serializer):
    history = ChatMessageSerializer(many=True, required=False, default=list)
    message = serializers.CharField(max_length=4000)


class ChatReportRequestSerializer(serializers.Serializer):
    messages = ChatMessageSerializer(many=True)
    entry_id = serializers.IntegerField(required=False)

    def validate_messages(self, value):
        if len(value) < MIN_MESSAGES_FOR_REPORT:
            raise serializers.ValidationError(
                "Keep the conversation going a little longer to create a report."
            )
        return value
