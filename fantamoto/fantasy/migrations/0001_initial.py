import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='League',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('start_date', models.DateTimeField(blank=True, null=True)),
                ('end_date', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Race',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('external_event_id', models.CharField(blank=True, help_text='MotoGP results API event uuid', max_length=64, null=True, unique=True)),
                ('name', models.CharField(max_length=200)),
                ('circuit', models.CharField(blank=True, max_length=200)),
                ('country', models.CharField(blank=True, max_length=100)),
                ('season', models.IntegerField()),
                ('round_number', models.IntegerField(default=0)),
                ('race_date', models.DateTimeField(help_text='Scheduled main race start (UTC)')),
                ('sprint_date', models.DateTimeField(blank=True, help_text='Scheduled sprint start (UTC)', null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['season', 'round_number', 'race_date'],
                'indexes': [
                    models.Index(fields=['race_date'], name='race_date_idx'),
                    models.Index(fields=['season', 'round_number'], name='race_season_round_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Rider',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('external_id', models.CharField(blank=True, help_text='MotoGP API rider uuid', max_length=64, null=True, unique=True)),
                ('name', models.CharField(max_length=200)),
                ('number', models.IntegerField(blank=True, null=True)),
                ('team_name', models.CharField(blank=True, max_length=200)),
                ('nationality', models.CharField(blank=True, max_length=3)),
                ('category', models.CharField(choices=[('MOTOGP', 'MotoGP'), ('MOTO2', 'Moto2'), ('MOTO3', 'Moto3')], max_length=10)),
                ('value', models.IntegerField(default=0, help_text='Fantasy market value')),
                ('is_active', models.BooleanField(default=True)),
                ('rider_type', models.CharField(choices=[('OFFICIAL', 'Official'), ('WILDCARD', 'Wildcard'), ('REPLACEMENT', 'Replacement'), ('TEST', 'Test Rider')], default='OFFICIAL', max_length=20)),
                ('photo_url', models.URLField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['category', '-value', 'number'],
                'indexes': [
                    models.Index(fields=['category', 'is_active'], name='rider_category_active_idx'),
                    models.Index(fields=['name'], name='rider_name_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SyncLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sync_type', models.CharField(choices=[('RIDERS', 'Riders'), ('CALENDAR', 'Calendar'), ('RACE_RESULTS', 'Race Results')], max_length=20)),
                ('status', models.CharField(choices=[('IN_PROGRESS', 'In Progress'), ('COMPLETED', 'Completed'), ('FAILED', 'Failed')], default='IN_PROGRESS', max_length=20)),
                ('message', models.TextField(blank=True)),
                ('details', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['sync_type', '-created_at'], name='synclog_type_created_idx'),
                    models.Index(fields=['status'], name='synclog_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Team',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('league', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='teams', to='fantasy.league')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='teams', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['league', 'name'],
                'unique_together': {('user', 'league')},
            },
        ),
        migrations.CreateModel(
            name='RaceResult',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('session', models.CharField(choices=[('MAIN', 'Race'), ('SPRINT', 'Sprint')], default='MAIN', max_length=10)),
                ('category', models.CharField(choices=[('MOTOGP', 'MotoGP'), ('MOTO2', 'Moto2'), ('MOTO3', 'Moto3')], help_text='Class the classification was published for', max_length=10)),
                ('position', models.IntegerField(blank=True, null=True)),
                ('status', models.CharField(choices=[('FINISHED', 'Finished'), ('DNF', 'Did Not Finish'), ('DNS', 'Did Not Start'), ('DSQ', 'Disqualified')], default='FINISHED', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('race', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='results', to='fantasy.race')),
                ('rider', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='results', to='fantasy.rider')),
            ],
            options={
                'ordering': ['race', 'session', 'category', 'position'],
                'indexes': [
                    models.Index(fields=['race', 'session'], name='result_race_session_idx'),
                ],
                'unique_together': {('race', 'rider', 'session')},
            },
        ),
        migrations.CreateModel(
            name='RaceLineup',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('race', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lineups', to='fantasy.race')),
                ('team', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lineups', to='fantasy.team')),
            ],
            options={
                'ordering': ['race', 'team'],
                'unique_together': {('team', 'race')},
            },
        ),
        migrations.CreateModel(
            name='LineupRider',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('predicted_position', models.IntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(30)])),
                ('lineup', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lineup_riders', to='fantasy.racelineup')),
                ('rider', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='lineup_picks', to='fantasy.rider')),
            ],
            options={
                'ordering': ['lineup', 'id'],
                'unique_together': {('lineup', 'rider')},
            },
        ),
        migrations.CreateModel(
            name='TeamScore',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('session', models.CharField(choices=[('MAIN', 'Race'), ('SPRINT', 'Sprint')], default='MAIN', max_length=10)),
                ('total_points', models.IntegerField(default=0)),
                ('breakdown', models.JSONField(blank=True, default=list)),
                ('calculated_at', models.DateTimeField(auto_now=True)),
                ('race', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='team_scores', to='fantasy.race')),
                ('team', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='scores', to='fantasy.team')),
            ],
            options={
                'ordering': ['race', 'session', 'total_points'],
                'indexes': [
                    models.Index(fields=['race', 'session', 'total_points'], name='score_race_session_total_idx'),
                ],
                'unique_together': {('team', 'race', 'session')},
            },
        ),
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('message', models.TextField()),
                ('notification_type', models.CharField(choices=[('RACE_RESULTS', 'Race Results')], max_length=30)),
                ('is_read', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user', 'is_read'], name='notification_user_read_idx'),
                    models.Index(fields=['notification_type'], name='notification_type_idx'),
                ],
            },
        ),
    ]
