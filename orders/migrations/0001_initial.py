import django.db.models.deletion
import orders.models
import uuid
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('authentication', '0001_initial'),
        ('catalog', '0001_initial'),
        ('enterprises', '0001_initial'),
        ('order_cycles', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('number', models.CharField(default=orders.models.generate_order_number, max_length=32, unique=True)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('state', models.CharField(choices=[('cart', 'Cart'), ('complete', 'Complete'), ('canceled', 'Canceled')], default='cart', max_length=20)),
                ('item_total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('bill_address', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='authentication.address')),
                ('customer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to='enterprises.customer')),
                ('distributor', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='distributed_orders', to='enterprises.enterprise')),
                ('order_cycle', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to='order_cycles.ordercycle')),
                ('ship_address', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='authentication.address')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-completed_at', '-created_at'],
                'indexes': [
                    models.Index(fields=['state', 'completed_at'], name='orders_orde_state_feb1d3_idx'),
                    models.Index(fields=['distributor', 'order_cycle'], name='orders_orde_distrib_1a749c_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LineItem',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('quantity', models.PositiveIntegerField(default=1)),
                ('price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='line_items', to='orders.order')),
                ('variant', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='line_items', to='catalog.variant')),
            ],
            options={
                'ordering': ['created_at'],
            },
        ),
    ]
