from django.urls import path
from .views import ChatReportView, ChatView

urlpatterns = [
    path("chat/", ChatView.as_view()),
    path("report/", ChatReportView.as_view()),
]
