# entries/views.py
import logging
from datetime import date

from django.db import DatabaseError
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .aggregation import entry_for_date, month_grid, sentiment_trend
from .exceptions import StoreUnavailable
from .models import JournalEntry
from .placeholders import generate_placeholder_entries
from .serializers import (
    CalendarCellSerializer,
    ChatReportSerializer,
    EntryCreateSerializer,
    EntryDetailSerializer,
    EntryListSerializer,
    SentimentTrendSerializer,
)

logger = logging.getLogger(__name__)


def parse_month(value):
    """Parse "YYYY-MM" into (year, month); raises ValueError."""
    year_str, month_str = value.split("-")
    year_i, month_i = int(year_str), int(month_str)
    if not 1 <= month_i <= 12:
        raise ValueError(value)
    # the grid spills into the neighbouring months
    if not date.min.year < year_i < date.max.year:
        raise ValueError(value)
    return year_i, month_i


class EntryViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Entry Store. Entries are created, read and deleted; once analysed they
    are never edited, apart from attaching a chat report.
    """

    queryset = JournalEntry.objects.all()

    def get_queryset(self):
        return JournalEntry.objects.filter(user=self.request.user).order_by("-created_at", "-id")

    def get_serializer_class(self):
        if self.action == "create":
            return EntryCreateSerializer
        if self.action == "list":
            return EntryListSerializer
        return EntryDetailSerializer

    def create(self, request, *args, **kwargs):
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        self.perform_create(ser)
        return Response(EntryDetailSerializer(ser.instance).data, status=status.HTTP_201_CREATED)

    def perform_create(self, serializer):
        try:
            serializer.save(user=self.request.user)
        except DatabaseError:
            logger.exception("[entries] create failed user=%s", self.request.user.pk)
            raise StoreUnavailable()

    def perform_destroy(self, instance):
        # a failed delete must leave the entry visible
        try:
            instance.delete()
        except DatabaseError:
            logger.exception("[entries] delete failed id=%s", instance.pk)
            raise StoreUnavailable("The entry could not be deleted. Please try again.")

    @action(detail=False, methods=["GET"])
    def calendar(self, request):
        """?month=YYYY-MM -> 42 cells (6 weeks, Sunday first), one entry per date."""
        today = date.today()
        month_param = request.query_params.get("month")
        if month_param:
            try:
                year_i, month_i = parse_month(month_param)
            except ValueError:
                return Response({"detail": "month must be YYYY-MM", "code": "invalid_month"}, status=400)
        else:
            year_i, month_i = today.year, today.month

        cells = month_grid(self.get_queryset(), year_i, month_i, today=today)
        return Response({
            "year": year_i,
            "month": month_i,
            "cells": CalendarCellSerializer(cells, many=True).data,
        })

    @action(detail=False, methods=["GET"], url_path="by-date")
    def by_date(self, request):
        """?date=YYYY-MM-DD -> the entry that represents that day"""
        key = request.query_params.get("date")
        if not key:
            return Response({"detail": "date query param required (YYYY-MM-DD)", "code": "invalid_date"}, status=400)
        try:
            day = date.fromisoformat(key)
        except ValueError:
            return Response({"detail": "date must be YYYY-MM-DD", "code": "invalid_date"}, status=400)

        entry = entry_for_date(self.get_queryset().filter(created_at__date=day), day)
        if not entry:
            return Response({"exists": False}, status=200)
        return Response({"exists": True, "entry": EntryDetailSerializer(entry).data})

    @action(detail=False, methods=["GET"])
    def sentiment(self, request):
        """Cumulative 30-day sentiment ("mental position") ending today."""
        entries = list(self.get_queryset())
        trend = sentiment_trend(entries)
        data = SentimentTrendSerializer(trend).data
        data["has_data"] = bool(entries)
        return Response(data)

    @action(detail=False, methods=["GET"])
    def samples(self, request):
        """Placeholder entries for users who have not written anything yet."""
        return Response(EntryDetailSerializer(generate_placeholder_entries(), many=True).data)

    @action(detail=True, methods=["POST"], url_path="chat-report")
    def chat_report(self, request, pk=None):
        entry = self.get_object()
        ser = ChatReportSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        entry.chat_report = ser.validated_data["chat_report"]
        try:
            entry.save(update_fields=["chat_report"])
        except DatabaseError:
            logger.exception("[entries] chat report attach failed id=%s", entry.pk)
            raise StoreUnavailable()
        return Response(EntryDetailSerializer(entry).data)
