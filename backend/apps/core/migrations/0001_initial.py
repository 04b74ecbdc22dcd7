# Generated initial migration for core app
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Team',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=120, unique=True)),
                ('color', models.CharField(default='#ffffff', max_length=16)),
                ('score', models.BigIntegerField(default=0)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'constraints': [models.CheckConstraint(condition=models.Q(('score__gte', 0)), name='team_score_non_negative')],
            },
        ),
        migrations.CreateModel(
            name='GameSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('singleton', models.BooleanField(default=True, unique=True)),
                ('is_active', models.BooleanField(default=False)),
                ('updated_at', models.DateTimeField(default=django.utils.timezone.now)),
            ],
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('message', models.TextField()),
                ('kind', models.CharField(choices=[('capture', 'Capture'), ('harvest', 'Harvest'), ('tick', 'Tick'), ('control', 'Control')], default='control', max_length=16)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('team', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='log_entries', to='core.team')),
            ],
            options={
                'ordering': ['created_at', 'id'],
            },
        ),
        migrations.CreateModel(
            name='ResourceLedgerEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('resource_type', models.CharField(choices=[('MEAT', 'Meat'), ('VEGETABLE', 'Vegetable'), ('RICE', 'Rice'), ('NOODLE', 'Noodle'), ('BREAD', 'Bread'), ('SEAFOOD', 'Seafood'), ('SPICE', 'Spice'), ('DAIRY', 'Dairy'), ('AMMO', 'Ammo')], max_length=16)),
                ('amount', models.BigIntegerField(default=0)),
                ('team', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='resources', to='core.team')),
            ],
            options={
                'constraints': [
                    models.UniqueConstraint(fields=('team', 'resource_type'), name='uniq_ledger_team_type'),
                    models.CheckConstraint(condition=models.Q(('amount__gte', 0)), name='ledger_amount_non_negative'),
                ],
            },
        ),
    ]
