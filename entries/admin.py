# entries/admin.py
from django.contrib import admin
from .models import JournalEntry

@admin.register(JournalEntry)
class JournalEntryAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "created_at", "summary", "is_placeholder")
    list_filter = ("created_at", "is_placeholder")
    search_fields = ("summary", "body", "thought")
