"""
Management command to list sitewide alerts.

Usage:
    python manage.py list_sitewide_alerts                  # List all alerts
    python manage.py list_sitewide_alerts --label=my-alert
    python manage.py list_sitewide_alerts --active-only --format=json
"""
import json

from django.core.management.base import BaseCommand, CommandError

from sitewide_alerts.models import SitewideAlert


class Command(BaseCommand):
    help = 'List sitewide alerts'

    def add_arguments(self, parser):
        parser.add_argument(
            '--label',
            type=str,
            help='Show only alerts with exactly this label'
        )
        parser.add_argument(
            '--active-only',
            action='store_true',
            help='Show only active alerts'
        )
        parser.add_argument(
            '--inactive-only',
            action='store_true',
            help='Show only inactive alerts'
        )
        parser.add_argument(
            '--format',
            choices=['table', 'json'],
            default='table',
            help='Output format (default: table)'
        )

    def handle(self, *args, **options):
        if options['active_only'] and options['inactive_only']:
            raise CommandError('Cannot specify both --active-only and --inactive-only')

        queryset = SitewideAlert.objects.all()

        if options['label']:
            queryset = queryset.with_label(options['label'])
        if options['active_only']:
            queryset = queryset.active()
        if options['inactive_only']:
            queryset = queryset.inactive()

        queryset = queryset.order_by('name', 'pk')

        if options['format'] == 'json':
            self._output_json(queryset)
            return

        if not queryset.exists():
            self.stdout.write(self.style.WARNING('No sitewide alerts found'))
            return

        self._output_table(queryset)

    def _output_table(self, queryset):
        """Output alerts in table format."""
        self.stdout.write('')
        self.stdout.write(f"{'Label':<30} {'Status':<10} {'Style':<10} {'Start':<20} {'End':<20}")
        self.stdout.write('-' * 94)

        for alert in queryset:
            name = alert.name
            if len(name) > 29:
                name = name[:26] + '...'

            if alert.status:
                status = 'Active'
                status_color = self.style.SUCCESS
            else:
                status = 'Inactive'
                status_color = self.style.WARNING

            start = alert.scheduled_start.strftime('%Y-%m-%d %H:%M') if alert.scheduled_start else '-'
            end = alert.scheduled_end.strftime('%Y-%m-%d %H:%M') if alert.scheduled_end else '-'

            self.stdout.write(
                f"{name:<30} {status_color(f'{status:<10}')} {alert.style:<10} {start:<20} {end:<20}"
            )

        self.stdout.write('')
        self.stdout.write(f'Total: {queryset.count()} sitewide alerts')

    def _output_json(self, queryset):
        """Output alerts in JSON format."""
        alerts_data = []
        for alert in queryset:
            alerts_data.append({
                'id': alert.pk,
                'label': alert.name,
                'message': alert.message,
                'status': alert.status,
                'style': alert.style,
                'dismissible': alert.dismissible,
                'scheduled': alert.scheduled_alert,
                'start': alert.scheduled_start.isoformat() if alert.scheduled_start else None,
                'end': alert.scheduled_end.isoformat() if alert.scheduled_end else None,
                'created_at': alert.created_at.isoformat(),
            })

        self.stdout.write(json.dumps(alerts_data, indent=2))
