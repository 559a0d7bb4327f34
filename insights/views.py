# insights/views.py
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from entries.exceptions import ProviderFailure

from .gating import AnalysisAlreadyRunning, AnalysisStatus, Readiness, insufficient_data_result
from .serializers import PatternAnalysisSerializer, ReportRequestSerializer
from .services import current_analysis, generate_detailed_report, run_pattern_analysis

logger = logging.getLogger(__name__)


class PatternAnalysisView(APIView):
    """GET: current state of the user's pattern analysis."""

    def get(self, request):
        return Response(PatternAnalysisSerializer(current_analysis(request.user)).data)


class RunAnalysisView(APIView):
    """
    POST: explicit "run analysis" trigger.
    - fewer than 3 entries -> fixed insufficient-data result, provider not called
    - already running       -> 409
    - otherwise             -> terminal state (SUCCEEDED or FAILED)
    """

    def post(self, request):
        try:
            readiness, record = run_pattern_analysis(request.user)
        except AnalysisAlreadyRunning:
            return Response(
                {"detail": "An analysis is already running. Please wait for it to finish.", "code": "analysis_running"},
                status=status.HTTP_409_CONFLICT,
            )

        if readiness is Readiness.INSUFFICIENT_DATA:
            return Response({"readiness": readiness.value, "result": insufficient_data_result()})

        return Response({"readiness": readiness.value, **PatternAnalysisSerializer(record).data})


class DetailedReportView(APIView):
    """POST {report_type} -> markdown report built on the last successful analysis."""

    def post(self, request):
        ser = ReportRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        report_type = ser.validated_data["report_type"]

        record = current_analysis(request.user)
        if record.status != AnalysisStatus.SUCCEEDED:
            return Response(
                {"detail": "Run the AI analysis first.", "code": "analysis_required"},
                status=status.HTTP_409_CONFLICT,
            )

        try:
            report = generate_detailed_report(request.user, report_type, record.result)
        except ProviderFailure:
            logger.exception("[report] generation failed type=%s", report_type)
            return Response(
                {"detail": "The report could not be generated right now. Please try again later.", "code": "provider_error"},
                status=status.HTTP_502_BAD_GATEWAY,
            )

        return Response({"report_type": report_type, "report": report})
