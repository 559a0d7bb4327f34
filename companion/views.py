# companion/views.py
import logging

from django.db import DatabaseError
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from entries.exceptions import ProviderFailure, StoreUnavailable
from entries.models import JournalEntry

from .serializers import ChatReportRequestSerializer, ChatRequestSerializer
from .services import chat_with_companion, generate_chat_report

logger = logging.getLogger(__name__)


def provider_unavailable(detail):
    return Response({"detail": detail, "code": "provider_error"}, status=status.HTTP_502_BAD_GATEWAY)


class ChatView(APIView):
    def post(self, request):
        ser = ChatRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            reply = chat_with_companion(
                request.user,
                ser.validated_data["history"],
                ser.validated_data["message"],
            )
        except ProviderFailure:
            logger.exception("[companion] chat failed user=%s", request.user.pk)
            return provider_unavailable("Sorry, the conversation is not available right now. Please try again later.")

        return Response({"reply": reply})


class ChatReportView(APIView):
    """POST {messages, entry_id?} -> markdown report; attached to the entry when entry_id is given."""

    def post(self, request):
        ser = ChatReportRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        entry = None
        entry_id = ser.validated_data.get("entry_id")
        if entry_id is not None:
            entry = get_object_or_404(JournalEntry, pk=entry_id, user=request.user)

        try:
            report = generate_chat_report(ser.validated_data["messages"])
        except ProviderFailure:
            logger.exception("[companion] report failed user=%s", request.user.pk)
            return provider_unavailable("Sorry, the report could not be created right now.")

        if entry is not None:
            entry.chat_report = report
            try:
                entry.save(update_fields=["chat_report"])
            except DatabaseError:
                logger.exception("[companion] attaching report failed entry=%s", entry.pk)
                raise StoreUnavailable()

        return Response({"report": report, "entry_id": entry.pk if entry else None})
