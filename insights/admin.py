from django.contrib import admin
from .models import PatternAnalysis

@admin.register(PatternAnalysis)
class PatternAnalysisAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "status", "entry_count", "updated_at")
    list_filter = ("status",)
