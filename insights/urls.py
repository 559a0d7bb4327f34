from django.urls import path
from .views import DetailedReportView, PatternAnalysisView, RunAnalysisView

urlpatterns = [
    path("", PatternAnalysisView.as_view()),
    path("run/", RunAnalysisView.as_view()),
    path("report/", DetailedReportView.as_view()),
]
