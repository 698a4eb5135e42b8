import django.db.models.deletion
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        ('enterprises', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='OrderCycle',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('orders_open_at', models.DateTimeField(blank=True, null=True)),
                ('orders_close_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('coordinator', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='coordinated_order_cycles', to='enterprises.enterprise')),
            ],
            options={
                'ordering': ['-orders_close_at', 'name'],
                'indexes': [models.Index(fields=['orders_open_at', 'orders_close_at'], name='order_cycle_orders__740646_idx')],
            },
        ),
        migrations.CreateModel(
            name='Exchange',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('incoming', models.BooleanField(default=False)),
                ('pickup_time', models.CharField(blank=True, max_length=255)),
                ('pickup_instructions', models.TextField(blank=True)),
                ('order_cycle', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='exchanges', to='order_cycles.ordercycle')),
                ('receiver', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='received_exchanges', to='enterprises.enterprise')),
                ('sender', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sent_exchanges', to='enterprises.enterprise')),
                ('variants', models.ManyToManyField(blank=True, related_name='exchanges', to='catalog.variant')),
            ],
            options={
                'unique_together': {('order_cycle', 'sender', 'receiver', 'incoming')},
            },
        ),
    ]
