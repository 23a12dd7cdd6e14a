"""
Management command to disable sitewide alerts.

Usage:
    python manage.py disable_sitewide_alert              # Disable all alerts
    python manage.py disable_sitewide_alert "my-alert"
"""
import logging

from django.core.management.base import BaseCommand, CommandError

from sitewide_alerts.services import get_cli_service

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Disable a sitewide alert, or all active alerts when no label is given'

    def add_arguments(self, parser):
        parser.add_argument(
            'label',
            nargs='?',
            default=None,
            help='Label of the alert to disable'
        )

    def handle(self, *args, **options):
        label = options['label']

        try:
            count = get_cli_service().disable(label)
        except Exception as e:
            logger.error(f"Failed to disable sitewide alerts: {e}")
            raise CommandError(str(e))

        if count == 0:
            self.stdout.write(self.style.WARNING('There were no sitewide alerts to disable.'))
        elif not label:
            self.stdout.write(self.style.SUCCESS('All active sitewide alerts have been disabled.'))
        else:
            self.stdout.write(self.style.SUCCESS(f"Disabled sitewide alert '{label}'."))
