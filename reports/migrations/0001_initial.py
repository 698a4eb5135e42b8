import django.db.models.deletion
import reports.models
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ReportExport',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('report_type', models.CharField(choices=[('supplier_totals', 'Order Cycle Supplier Totals'), ('supplier_totals_by_distributor', 'Order Cycle Supplier Totals by Distributor'), ('distributor_totals_by_supplier', 'Order Cycle Distributor Totals by Supplier'), ('customer_totals', 'Order Cycle Customer Totals')], max_length=40)),
                ('format', models.CharField(choices=[('csv', 'CSV'), ('excel', 'Excel'), ('pdf', 'PDF')], default='csv', max_length=10)),
                ('filters', models.JSONField(blank=True, default=dict)),
                ('file_path', models.CharField(blank=True, max_length=500)),
                ('file_size', models.IntegerField(blank=True, null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('processing', 'Processing'), ('completed', 'Completed'), ('failed', 'Failed')], default='pending', max_length=20)),
                ('error_message', models.TextField(blank=True)),
                ('requested_at', models.DateTimeField(auto_now_add=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('expires_at', models.DateTimeField(default=reports.models.default_expiry)),
                ('record_count', models.IntegerField(default=0)),
                ('generated_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='report_exports', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-requested_at'],
                'indexes': [
                    models.Index(fields=['report_type', 'status'], name='reports_rep_report__b145c4_idx'),
                    models.Index(fields=['generated_by', 'requested_at'], name='reports_rep_generat_2a3d31_idx'),
                    models.Index(fields=['expires_at'], name='reports_rep_expires_d626f4_idx'),
                ],
            },
        ),
    ]
