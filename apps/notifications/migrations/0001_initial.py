from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('recipient_id', models.PositiveBigIntegerField()),
                ('recipient_type', models.CharField(choices=[('worker', 'Worker'), ('employer', 'Employer')], max_length=10)),
                ('event_type', models.CharField(choices=[('new_job_match', 'New Job Match'), ('new_application', 'New Application'), ('application_accepted', 'Application Accepted'), ('application_rejected', 'Application Rejected'), ('application_withdrawn', 'Application Withdrawn'), ('job_started', 'Job Started'), ('job_completed', 'Job Completed'), ('payment_received', 'Payment Received'), ('withdrawal_requested', 'Withdrawal Requested')], max_length=40)),
                ('title', models.CharField(max_length=200)),
                ('message', models.TextField()),
                ('payload', models.JSONField(blank=True, default=dict)),
                ('is_read', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['recipient_type', 'recipient_id', 'is_read'], name='notif_recipient_unread_idx')],
            },
        ),
    ]
