# Generated manually for sitewide alerts app

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='SitewideAlert',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(db_index=True, help_text='Internal label; not shown to visitors and not unique', max_length=255)),
                ('message', models.TextField()),
                ('status', models.BooleanField(default=True, help_text='Whether the alert is active')),
                ('style', models.CharField(default='primary', max_length=64)),
                ('dismissible', models.BooleanField(blank=True, null=True)),
                ('scheduled_alert', models.BooleanField(default=False)),
                ('scheduled_start', models.DateTimeField(blank=True, null=True)),
                ('scheduled_end', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['name', 'status'], name='sitewide_alert_name_status_idx')],
            },
        ),
    ]
