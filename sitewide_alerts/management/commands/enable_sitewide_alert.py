"""
Management command to enable a sitewide alert.

Usage:
    python manage.py enable_sitewide_alert "my-alert"
"""
import logging

from django.core.management.base import BaseCommand, CommandError

from sitewide_alerts.services import get_cli_service

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Enable a sitewide alert'

    def add_arguments(self, parser):
        parser.add_argument(
            'label',
            help='Label of the alert to enable'
        )

    def handle(self, *args, **options):
        label = options['label']

        try:
            get_cli_service().enable(label)
        except Exception as e:
            logger.error(f"Failed to enable sitewide alert '{label}': {e}")
            raise CommandError(str(e))

        self.stdout.write(self.style.SUCCESS(f"Enabled sitewide alert '{label}'."))
