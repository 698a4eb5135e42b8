# reports/models.py
from django.db import models
from django.conf import settings
from django.utils import timezone
from datetime import timedelta
from utils.constants import (
    REPORT_TYPES, EXPORT_FORMATS, EXPORT_STATUSES, EXPORT_PENDING, EXPORT_COMPLETED,
    EXPORT_FAILED, EXPORT_FILE_EXTENSIONS, EXPORT_CONTENT_TYPES, EXPORT_RETENTION_DAYS,
)
import uuid


def default_expiry():
    return timezone.now() + timedelta(days=EXPORT_RETENTION_DAYS)


class ReportExport(models.Model):
    """An orders and fulfillments report rendered to a downloadable file"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    report_type = models.CharField(max_length=40, choices=REPORT_TYPES)
    format = models.CharField(max_length=10, choices=EXPORT_FORMATS, default='csv')
    filters = models.JSONField(default=dict, blank=True)

    status = models.CharField(max_length=20, choices=EXPORT_STATUSES, default=EXPORT_PENDING)
    error_message = models.TextField(blank=True)

    file_path = models.CharField(max_length=500, blank=True)
    file_size = models.IntegerField(null=True, blank=True)
    record_count = models.IntegerField(default=0)

    generated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name='report_exports'
    )
    requested_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(default=default_expiry)

    class Meta:
        ordering = ['-requested_at']
        indexes = [
            models.Index(fields=['report_type', 'status']),
            models.Index(fields=['generated_by', 'requested_at']),
            models.Index(fields=['expires_at']),
        ]

    def __str__(self):
        return f"{self.get_report_type_display()} ({self.format}, {self.status})"

    def is_expired(self):
        return timezone.now() > self.expires_at

    @property
    def is_downloadable(self):
        return self.status == EXPORT_COMPLETED and not self.is_expired()

    @property
    def content_type(self):
        return EXPORT_CONTENT_TYPES.get(self.format, 'application/octet-stream')

    @property
    def download_filename(self):
        extension = EXPORT_FILE_EXTENSIONS.get(self.format, self.format)
        return f"{self.report_type}_{self.requested_at:%Y%m%d}.{extension}"

    def mark_completed(self, file_path, record_count):
        self.status = EXPORT_COMPLETED
        self.file_path = file_path
        self.record_count = record_count
        self.completed_at = timezone.now()
        self.save()

    def mark_failed(self, error_message):
        self.status = EXPORT_FAILED
        self.error_message = error_message
        self.completed_at = timezone.now()
        self.save()
