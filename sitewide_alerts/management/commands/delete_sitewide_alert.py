"""
Management command to delete sitewide alerts.

Usage:
    python manage.py delete_sitewide_alert "label"
    python manage.py delete_sitewide_alert "label" --noinput
"""
import logging

from django.core.management.base import BaseCommand, CommandError

from sitewide_alerts.services import get_cli_service

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Delete all sitewide alerts with the given label'

    def add_arguments(self, parser):
        parser.add_argument(
            'label',
            help='Label of the alert(s) to delete'
        )
        parser.add_argument(
            '--noinput', '--no-input',
            action='store_false',
            dest='interactive',
            help='Do not prompt for confirmation'
        )

    def handle(self, *args, **options):
        label = options['label']

        if options['interactive']:
            confirm = input(
                f"Are you sure you want to delete the sitewide alert labeled '{label}'? (y/N): "
            )
            if confirm.strip().lower() != 'y':
                raise CommandError('Operation cancelled by user.')

        try:
            count = get_cli_service().delete(label)
        except Exception as e:
            logger.error(f"Failed to delete sitewide alerts labelled '{label}': {e}")
            raise CommandError(str(e))

        if count >= 1:
            self.stdout.write(
                self.style.SUCCESS(f"Deleted {count} sitewide alerts labelled '{label}'.")
            )
        else:
            self.stdout.write(
                self.style.WARNING(f"Found no sitewide alerts with label '{label}' to delete.")
            )
