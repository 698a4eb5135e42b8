# reports/serializers.py
from rest_framework import serializers
from .models import ReportExport
from authentication.serializers import UserBasicSerializer
from utils.constants import REPORT_TYPES, REPORT_SUPPLIER_TOTALS, EXPORT_FORMATS


class ReportExportSerializer(serializers.ModelSerializer):
    generated_by = UserBasicSerializer(read_only=True)
    report_type_display = serializers.CharField(source='get_report_type_display', read_only=True)
    format_display = serializers.CharField(source='get_format_display', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    is_expired = serializers.SerializerMethodField()
    download_url = serializers.SerializerMethodField()

    class Meta:
        model = ReportExport
        fields = [
            'id', 'report_type', 'report_type_display', 'format', 'format_display',
            'filters', 'file_size', 'status', 'status_display',
            'error_message', 'generated_by', 'requested_at',
            'completed_at', 'expires_at', 'record_count', 'is_expired', 'download_url'
        ]
        read_only_fields = fields

    def get_is_expired(self, obj):
        return obj.is_expired()

    def get_download_url(self, obj):
        if obj.is_downloadable:
            request = self.context.get('request')
            if request:
                return request.build_absolute_uri(f'/api/reports/exports/{obj.id}/download/')
        return None


class OrdersAndFulfillmentsFilterSerializer(serializers.Serializer):
    report_type = serializers.ChoiceField(choices=REPORT_TYPES, default=REPORT_SUPPLIER_TOTALS)
    start_date = serializers.DateField(required=False, allow_null=True)
    end_date = serializers.DateField(required=False, allow_null=True)
    distributor_id = serializers.UUIDField(required=False, allow_null=True)
    supplier_id = serializers.UUIDField(required=False, allow_null=True)
    order_cycle_id = serializers.UUIDField(required=False, allow_null=True)
    format = serializers.ChoiceField(choices=EXPORT_FORMATS, required=False, allow_null=True)

    def validate(self, data):
        start_date = data.get('start_date')
        end_date = data.get('end_date')
        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError({'end_date': 'End date must be after start date'})
        return data

    def report_options(self):
        """Validated filters as JSON-safe values, without the export format"""
        options = {}
        for key, value in self.validated_data.items():
            if key == 'format' or value is None:
                continue
            options[key] = str(value)
        return options
