# reports/tasks.py
from celery import shared_task
from django.conf import settings
from django.utils import timezone
from utils.constants import EXPORT_PROCESSING, EXPORT_FILE_EXTENSIONS
import logging
import os

from .access import Permissions
from .models import ReportExport
from .orders_and_fulfillments import OrdersAndFulfillmentsReport
from .utils import export_report

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3)
def generate_report_export(self, report_export_id):
    """
    Build an orders and fulfillments report and write it to disk
    """
    try:
        report_export = ReportExport.objects.select_related('generated_by').get(id=report_export_id)
    except ReportExport.DoesNotExist:
        logger.error(f"Report export {report_export_id} not found")
        return None

    report_export.status = EXPORT_PROCESSING
    report_export.save(update_fields=['status'])

    try:
        build_report_file(report_export)
    except ValueError as e:
        logger.error(f"Report {report_export_id} cannot be generated: {str(e)}")
        report_export.mark_failed(str(e))
        return None
    except Exception as e:
        logger.error(f"Failed to generate report {report_export_id}: {str(e)}")
        report_export.mark_failed(str(e))
        raise self.retry(exc=e, countdown=60)

    logger.info(f"Report {report_export_id} generated successfully")
    return str(report_export_id)


def build_report_file(report_export):
    if report_export.generated_by is None:
        raise ValueError('Report owner no longer exists')

    options = dict(report_export.filters)
    options['report_type'] = report_export.report_type
    report = OrdersAndFulfillmentsReport(
        Permissions(report_export.generated_by), options, render_table=True
    )
    rows = report.table()

    file_content = export_report(
        report.header,
        rows,
        report_export.format,
        report_export.get_report_type_display()
    )
    file_path = save_report_file(report_export, file_content)
    report_export.mark_completed(file_path, len(rows))


@shared_task
def cleanup_expired_reports():
    """
    Cleanup expired report files
    """
    count = delete_expired_reports()
    logger.info(f"Cleaned up {count} expired reports")
    return count


def delete_expired_reports():
    count = 0
    for report in ReportExport.objects.filter(expires_at__lt=timezone.now()):
        if report.file_path and os.path.exists(report.file_path):
            os.remove(report.file_path)
        report.delete()
        count += 1
    return count


def save_report_file(report_export, file_content):
    reports_dir = os.path.join(settings.MEDIA_ROOT, 'reports')
    os.makedirs(reports_dir, exist_ok=True)

    extension = EXPORT_FILE_EXTENSIONS.get(report_export.format, report_export.format)
    file_path = os.path.join(reports_dir, f"{report_export.id}.{extension}")

    mode = 'wb' if isinstance(file_content, bytes) else 'w'
    with open(file_path, mode) as f:
        f.write(file_content)

    report_export.file_size = os.path.getsize(file_path)
    report_export.save(update_fields=['file_size'])

    return file_path
