from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
import uuid

import apps.nodes.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Node',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('resource_type', models.CharField(choices=[('MEAT', 'Meat'), ('VEGETABLE', 'Vegetable'), ('RICE', 'Rice'), ('NOODLE', 'Noodle'), ('BREAD', 'Bread'), ('SEAFOOD', 'Seafood'), ('SPICE', 'Spice'), ('DAIRY', 'Dairy'), ('AMMO', 'Ammo')], default='AMMO', max_length=16)),
                ('capture_rate', models.PositiveIntegerField(default=10)),
                ('last_settled_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('secret_key', models.CharField(default=apps.nodes.models.generate_secret_key, max_length=128)),
                ('x', models.FloatField(default=50.0)),
                ('y', models.FloatField(default=50.0)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('owner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='nodes', to='core.team')),
            ],
            options={
                'ordering': ['name'],
                'constraints': [models.CheckConstraint(condition=models.Q(('capture_rate__gt', 0)), name='node_capture_rate_positive')],
            },
        ),
    ]
