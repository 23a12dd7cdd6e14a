"""
Management command to create a sitewide alert.

Usage:
    python manage.py create_sitewide_alert "label" "Message"
    python manage.py create_sitewide_alert "label" "Message" --style=warning --no-status
    python manage.py create_sitewide_alert "label" "Message" --start=2022-10-15T15:00:00 --end=2022-10-15T17:00:00
    python manage.py create_sitewide_alert "label" "Message" --start=13:45 --end="tomorrow 13:45"
    python manage.py create_sitewide_alert "label" "Message" --end="15 minutes"
"""
import argparse
import logging

from django.core.management.base import BaseCommand, CommandError

from sitewide_alerts.services import get_cli_service

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Create a sitewide alert'

    def add_arguments(self, parser):
        parser.add_argument(
            'label',
            help='Internal label of the alert; not shown to visitors'
        )
        parser.add_argument(
            'message',
            help='Text content of the alert'
        )
        parser.add_argument(
            '--start',
            type=str,
            help='When the alert should appear, e.g. "2020-10-22T14:30:00-05:00", '
                 '"October 22, 2020" or "Saturday 12:30"'
        )
        parser.add_argument(
            '--end',
            type=str,
            help='When the alert should disappear, e.g. "+6 hours" or "midnight". '
                 'Without --start the alert starts immediately'
        )
        parser.add_argument(
            '--style',
            type=str,
            help='Style of the alert (default: primary)'
        )
        parser.add_argument(
            '--status',
            action=argparse.BooleanOptionalAction,
            default=None,
            help='Whether the alert is active (default: active)'
        )
        parser.add_argument(
            '--dismissible',
            action=argparse.BooleanOptionalAction,
            default=None,
            help='Whether visitors may dismiss the alert'
        )

    def handle(self, *args, **options):
        label = options['label']
        alert_options = {
            key: options[key]
            for key in ('start', 'end', 'style', 'status', 'dismissible')
            if options.get(key) is not None
        }

        try:
            get_cli_service().create(label, options['message'], alert_options)
        except Exception as e:
            logger.error(f"Failed to create sitewide alert '{label}': {e}")
            raise CommandError(str(e))

        self.stdout.write(
            self.style.SUCCESS(f"Created sitewide alert '{label}'.")
        )
