# reports/admin.py
from django.contrib import admin
from .models import ReportExport
from .tasks import delete_expired_reports


@admin.register(ReportExport)
class ReportExportAdmin(admin.ModelAdmin):
    list_display = ['report_type', 'format', 'status', 'record_count', 'generated_by', 'requested_at', 'expires_at']
    list_filter = ['report_type', 'format', 'status']
    search_fields = ['generated_by__email']
    readonly_fields = [
        'id', 'status', 'error_message', 'file_path', 'file_size',
        'record_count', 'generated_by', 'requested_at', 'completed_at',
    ]
    date_hierarchy = 'requested_at'
    actions = ['purge_expired']

    @admin.action(description='Delete all expired exports and their files')
    def purge_expired(self, request, queryset):
        count = delete_expired_reports()
        self.message_user(request, f"Deleted {count} expired exports")
