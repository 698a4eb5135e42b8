# reports/views.py
from rest_framework import viewsets, status, generics
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.http import FileResponse
from django.utils.translation import gettext as _
from utils.constants import EXPORT_PENDING, EXPORT_COMPLETED
import logging
import os

from .access import Permissions
from .models import ReportExport
from .orders_and_fulfillments import OrdersAndFulfillmentsReport
from .permissions import CanGenerateReports
from .serializers import ReportExportSerializer, OrdersAndFulfillmentsFilterSerializer
from .tasks import generate_report_export, delete_expired_reports
from .utils import format_rows

logger = logging.getLogger(__name__)


class ReportExportViewSet(viewsets.ReadOnlyModelViewSet):
    """
    List, retrieve and download generated report files.
    """
    serializer_class = ReportExportSerializer
    permission_classes = [IsAuthenticated, CanGenerateReports]

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return ReportExport.objects.none()

        queryset = ReportExport.objects.select_related('generated_by')
        if self.request.user.is_admin:
            return queryset
        return queryset.filter(generated_by=self.request.user)

    @action(detail=True, methods=['get'])
    def download(self, request, pk=None):
        report_export = self.get_object()

        if report_export.is_expired():
            return Response({'error': _('This export has expired')}, status=status.HTTP_410_GONE)
        if report_export.status != EXPORT_COMPLETED:
            return Response(
                {'error': _('Export is %s') % report_export.get_status_display().lower()},
                status=status.HTTP_400_BAD_REQUEST
            )
        if not (report_export.file_path and os.path.exists(report_export.file_path)):
            return Response({'error': _('Export file is missing')}, status=status.HTTP_404_NOT_FOUND)

        logger.info(f"Serving export {report_export.id} to {request.user.email}")
        return FileResponse(
            open(report_export.file_path, 'rb'),
            as_attachment=True,
            filename=report_export.download_filename,
            content_type=report_export.content_type
        )

    @action(detail=False, methods=['post'])
    def cleanup_expired(self, request):
        if not request.user.is_admin:
            return Response({'error': _('Only admins can purge exports')}, status=status.HTTP_403_FORBIDDEN)

        return Response({'deleted': delete_expired_reports()})


class OrdersAndFulfillmentsReportView(generics.GenericAPIView):
    """
    Orders and fulfillments totals.

    Without a `format` the table is returned inline as `header` and `rows`.
    With one, an export is queued and its record returned.
    """
    permission_classes = [IsAuthenticated, CanGenerateReports]
    serializer_class = OrdersAndFulfillmentsFilterSerializer

    def post(self, request):
        filter_serializer = self.get_serializer(data=request.data)
        filter_serializer.is_valid(raise_exception=True)

        options = filter_serializer.report_options()
        export_format = filter_serializer.validated_data.get('format')

        if export_format:
            return self.queue_export(request, options, export_format)

        report = OrdersAndFulfillmentsReport(Permissions(request.user), options, render_table=True)
        rows = report.table()
        return Response({
            'report_type': report.report_type,
            'header': report.header,
            'rows': format_rows(rows),
        }, status=status.HTTP_200_OK)

    def queue_export(self, request, options, export_format):
        report_type = options.pop('report_type')
        report_export = ReportExport.objects.create(
            report_type=report_type,
            format=export_format,
            filters=options,
            generated_by=request.user,
            status=EXPORT_PENDING
        )
        generate_report_export.delay(str(report_export.id))
        logger.info(f"Queued {report_type} export {report_export.id} for {request.user.email}")

        report_export.refresh_from_db()
        serializer = ReportExportSerializer(report_export, context={'request': request})
        return Response({
            'message': _('Report export queued'),
            'export': serializer.data
        }, status=status.HTTP_202_ACCEPTED)
