import django.db.models.deletion
import uuid
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('enterprises', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Property',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('presentation', models.CharField(max_length=255)),
            ],
            options={
                'verbose_name_plural': 'properties',
                'ordering': ['presentation'],
            },
        ),
        migrations.CreateModel(
            name='Taxon',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('pretty_name', models.CharField(blank=True, max_length=255)),
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='children', to='catalog.taxon')),
            ],
            options={
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('primary_taxon', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='primary_products', to='catalog.taxon')),
                ('supplier', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='supplied_products', to='enterprises.enterprise')),
            ],
            options={
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['supplier'], name='catalog_pro_supplie_7dd80b_idx'),
                    models.Index(fields=['primary_taxon'], name='catalog_pro_primary_c2f916_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ProductProperty',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('value', models.CharField(blank=True, max_length=255)),
                ('position', models.PositiveIntegerField(default=0)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='product_properties', to='catalog.product')),
                ('property', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to='catalog.property')),
            ],
            options={
                'ordering': ['position'],
                'unique_together': {('product', 'property')},
            },
        ),
        migrations.AddField(
            model_name='product',
            name='properties',
            field=models.ManyToManyField(blank=True, related_name='products', through='catalog.ProductProperty', to='catalog.property'),
        ),
        migrations.CreateModel(
            name='ProducerProperty',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('value', models.CharField(blank=True, max_length=255)),
                ('position', models.PositiveIntegerField(default=0)),
                ('producer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='producer_properties', to='enterprises.enterprise')),
                ('property', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='producer_properties', to='catalog.property')),
            ],
            options={
                'ordering': ['position'],
                'unique_together': {('producer', 'property')},
            },
        ),
        migrations.CreateModel(
            name='Variant',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('sku', models.CharField(blank=True, max_length=255)),
                ('display_name', models.CharField(blank=True, max_length=255)),
                ('unit_description', models.CharField(blank=True, max_length=255)),
                ('price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('count_on_hand', models.IntegerField(default=0)),
                ('on_demand', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='variants', to='catalog.product')),
            ],
            options={
                'ordering': ['created_at'],
            },
        ),
        migrations.CreateModel(
            name='VariantOverride',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('count_on_hand', models.IntegerField(blank=True, null=True)),
                ('on_demand', models.BooleanField(blank=True, null=True)),
                ('tag_list', models.TextField(blank=True, default='')),
                ('hub', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='variant_overrides', to='enterprises.enterprise')),
                ('variant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='overrides', to='catalog.variant')),
            ],
            options={
                'indexes': [models.Index(fields=['hub'], name='catalog_var_hub_id_b63d96_idx')],
                'unique_together': {('hub', 'variant')},
            },
        ),
    ]
