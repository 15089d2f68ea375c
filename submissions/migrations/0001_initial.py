import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('users', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='LogbookReport',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('attachment_data', models.BinaryField(blank=True, null=True)),
                ('attachment_name', models.CharField(blank=True, max_length=255)),
                ('attachment_mime_type', models.CharField(blank=True, max_length=100)),
                ('attachment_size', models.PositiveIntegerField(blank=True, null=True)),
                ('week_date', models.DateField()),
                ('week_range', models.CharField(max_length=100)),
                ('reports', models.JSONField()),
                ('iso_year', models.PositiveSmallIntegerField()),
                ('iso_week', models.PositiveSmallIntegerField()),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('graded', 'Graded')], default='pending', max_length=20)),
                ('grade', models.CharField(blank=True, max_length=5, null=True)),
                ('graded_at', models.DateTimeField(blank=True, null=True)),
                ('submitted_at', models.DateTimeField(auto_now_add=True)),
                ('graded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='graded_reports', to='users.adminprincipal')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='logbook_reports', to='users.intern')),
            ],
            options={
                'ordering': ['-submitted_at', '-id'],
                'constraints': [
                    models.UniqueConstraint(fields=('owner', 'iso_year', 'iso_week'), name='one_logbook_report_per_week'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LeaveRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('attachment_data', models.BinaryField(blank=True, null=True)),
                ('attachment_name', models.CharField(blank=True, max_length=255)),
                ('attachment_mime_type', models.CharField(blank=True, max_length=100)),
                ('attachment_size', models.PositiveIntegerField(blank=True, null=True)),
                ('leave_type', models.CharField(max_length=100)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField()),
                ('reason', models.TextField()),
                ('status', models.CharField(choices=[('Pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')], default='Pending', max_length=20)),
                ('rejection_reason', models.TextField(blank=True, null=True)),
                ('reviewed_at', models.DateTimeField(blank=True, null=True)),
                ('requested_at', models.DateTimeField(auto_now_add=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='leave_requests', to='users.intern')),
                ('reviewed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reviewed_leave_requests', to='users.adminprincipal')),
            ],
            options={
                'ordering': ['-requested_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='ComplaintSuggestion',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('subject', models.CharField(blank=True, max_length=255, null=True)),
                ('message', models.TextField(blank=True, null=True)),
                ('incident_date_time', models.DateTimeField(blank=True, null=True)),
                ('incident_location', models.CharField(blank=True, max_length=255, null=True)),
                ('complaint_details', models.TextField(blank=True, null=True)),
                ('participants', models.JSONField(blank=True, null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('resolved', 'Resolved'), ('dismissed', 'Dismissed')], default='pending', max_length=20)),
                ('response', models.TextField(blank=True, null=True)),
                ('reviewed_at', models.DateTimeField(blank=True, null=True)),
                ('submitted_at', models.DateTimeField(auto_now_add=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='complaints', to='users.intern')),
                ('reviewed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reviewed_complaints', to='users.adminprincipal')),
            ],
            options={
                'ordering': ['-submitted_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='ProjectUpload',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('attachment_data', models.BinaryField(blank=True, null=True)),
                ('attachment_name', models.CharField(blank=True, max_length=255)),
                ('attachment_mime_type', models.CharField(blank=True, max_length=100)),
                ('attachment_size', models.PositiveIntegerField(blank=True, null=True)),
                ('project_name', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('uploaded_at', models.DateTimeField(auto_now_add=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='projects', to='users.intern')),
            ],
            options={
                'ordering': ['-uploaded_at', '-id'],
            },
        ),
    ]
