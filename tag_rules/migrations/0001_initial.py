import django.db.models.deletion
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('enterprises', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='TagRule',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('is_default', models.BooleanField(default=False)),
                ('priority', models.PositiveIntegerField(default=100, help_text='Lower numbers are consulted first')),
                ('preferred_customer_tags', models.TextField(blank=True, default='')),
                ('preferred_variant_tags', models.TextField(blank=True, default='')),
                ('preferred_matched_variants_visibility', models.CharField(choices=[('visible', 'Visible'), ('hidden', 'Hidden')], default='visible', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('enterprise', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tag_rules', to='enterprises.enterprise')),
            ],
            options={
                'ordering': ['priority', 'created_at'],
                'indexes': [models.Index(fields=['enterprise', 'is_default'], name='tag_rules_t_enterpr_2dcebf_idx')],
            },
        ),
    ]
