"""
Sitewide Alert Tests
"""
from datetime import datetime, timedelta, timezone as dt_timezone
from unittest.mock import patch
from zoneinfo import ZoneInfo

from django.contrib.admin.sites import AdminSite
from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.test import TestCase, override_settings
from django.test.client import RequestFactory
from django.utils import timezone

from .admin import SitewideAlertAdmin
from .exceptions import InvalidArgument, StorageError
from .models import SitewideAlert
from .repository import DjangoAlertRepository
from .services import SitewideAlertCommands, get_cli_service

UTC = dt_timezone.utc


class SitewideAlertModelTest(TestCase):
    """Test SitewideAlert model"""

    def setUp(self):
        self.now = timezone.now()
        self.alert = SitewideAlert.objects.create(
            name='Test Alert',
            message='Test message',
        )

    def test_defaults(self):
        self.assertTrue(self.alert.status)
        self.assertEqual(self.alert.style, 'primary')
        self.assertIsNone(self.alert.dismissible)
        self.assertFalse(self.alert.scheduled_alert)
        self.assertEqual(str(self.alert), 'Test Alert (active)')

    def test_unscheduled_alert_visibility(self):
        self.assertTrue(self.alert.is_visible(self.now))
        self.alert.status = False
        self.assertFalse(self.alert.is_visible(self.now))

    def test_scheduled_alert_visibility(self):
        self.alert.scheduled_alert = True
        self.alert.scheduled_start = self.now + timedelta(hours=1)
        self.alert.scheduled_end = self.now + timedelta(hours=2)

        self.assertFalse(self.alert.is_visible(self.now))
        self.assertTrue(self.alert.is_visible(self.now + timedelta(minutes=90)))
        self.assertFalse(self.alert.is_visible(self.now + timedelta(hours=2)))

    def test_visible_queryset(self):
        SitewideAlert.objects.create(name='Inactive', message='m', status=False)
        SitewideAlert.objects.create(
            name='Future', message='m', scheduled_alert=True,
            scheduled_start=self.now + timedelta(days=1),
        )
        SitewideAlert.objects.create(
            name='Running', message='m', scheduled_alert=True,
            scheduled_start=self.now - timedelta(hours=1),
            scheduled_end=self.now + timedelta(hours=1),
        )
        SitewideAlert.objects.create(
            name='Expired', message='m', scheduled_alert=True,
            scheduled_start=self.now - timedelta(days=2),
            scheduled_end=self.now - timedelta(days=1),
        )

        names = set(SitewideAlert.objects.visible(self.now).values_list('name', flat=True))
        self.assertEqual(names, {'Test Alert', 'Running'})

    def test_clean_rejects_unknown_style(self):
        self.alert.style = 'purple'
        with self.assertRaises(ValidationError) as cm:
            self.alert.full_clean()
        self.assertIn('style', cm.exception.message_dict)

    def test_clean_rejects_schedule_without_dates(self):
        self.alert.scheduled_alert = True
        with self.assertRaises(ValidationError) as cm:
            self.alert.full_clean()
        self.assertIn('scheduled_alert', cm.exception.message_dict)

    def test_clean_rejects_end_before_start(self):
        self.alert.scheduled_alert = True
        self.alert.scheduled_start = self.now
        self.alert.scheduled_end = self.now - timedelta(hours=1)
        with self.assertRaises(ValidationError) as cm:
            self.alert.full_clean()
        self.assertIn('scheduled_end', cm.exception.message_dict)


class DjangoAlertRepositoryTest(TestCase):
    """Test the ORM-backed repository"""

    def setUp(self):
        self.repository = DjangoAlertRepository(storage_timezone=UTC)
        self.active = SitewideAlert.objects.create(name='alert', message='m')
        self.inactive = SitewideAlert.objects.create(name='alert', message='m', status=False)
        self.other = SitewideAlert.objects.create(name='Alert', message='m')

    def test_find_by_label_is_exact(self):
        self.assertEqual(self.repository.find_by_label('alert'), [self.active, self.inactive])
        self.assertEqual(self.repository.find_by_label('Alert'), [self.other])
        self.assertEqual(self.repository.find_by_label('aler'), [])
        self.assertEqual(self.repository.find_by_label(''), [])

    def test_find_by_label_and_status(self):
        self.assertEqual(self.repository.find_by_label_and_status('alert', True), [self.active])
        self.assertEqual(self.repository.find_by_label_and_status('alert', False), [self.inactive])

    def test_find_by_status(self):
        self.assertEqual(self.repository.find_by_status(True), [self.active, self.other])

    def test_insert_converts_storage_dates(self):
        alert = self.repository.insert({
            'name': 'scheduled',
            'message': 'm',
            'scheduled_alert': True,
            'scheduled_start': '2030-10-15T15:00:00',
            'scheduled_end': None,
        })
        alert.refresh_from_db()
        self.assertEqual(alert.scheduled_start, datetime(2030, 10, 15, 15, 0, tzinfo=UTC))
        self.assertIsNone(alert.scheduled_end)

    def test_delete_many(self):
        self.assertEqual(self.repository.delete_many([]), 0)
        self.assertEqual(self.repository.delete_many([self.active, self.inactive]), 2)
        self.assertEqual(list(SitewideAlert.objects.all()), [self.other])

    def test_database_errors_become_storage_errors(self):
        with patch.object(SitewideAlert.objects, 'create', side_effect=DatabaseError('DB Error')):
            with self.assertRaises(StorageError) as cm:
                self.repository.insert({'name': 'x', 'message': 'm'})
        self.assertEqual(cm.exception.operation, 'insert')
        self.assertIn('DB Error', str(cm.exception))


class FailingUpdateRepository(DjangoAlertRepository):
    """Repository whose n-th update fails."""

    def __init__(self, fail_on: int):
        super().__init__(storage_timezone=UTC)
        self.fail_on = fail_on
        self.updates = 0

    def update(self, alert):
        self.updates += 1
        if self.updates == self.fail_on:
            raise StorageError('update', DatabaseError('disk full'))
        super().update(alert)


class SitewideAlertCommandsTest(TestCase):
    """Test the sitewide alert command service"""

    label = 'automated-test-alert'
    message = 'A sitewide alert test.'

    def setUp(self):
        self.now = datetime(2030, 1, 1, 12, 0, tzinfo=UTC)
        self.service = SitewideAlertCommands(
            DjangoAlertRepository(storage_timezone=UTC),
            storage_timezone=UTC,
            clock=lambda: self.now,
        )

    def test_get_cli_service(self):
        service = get_cli_service()
        self.assertIsInstance(service, SitewideAlertCommands)
        self.assertIsInstance(service.repository, DjangoAlertRepository)
        self.assertIn('primary', service.styles)

    def test_create_minimal(self):
        alert = self.service.create(self.label, self.message)

        self.assertEqual(SitewideAlert.objects.count(), 1)
        alert.refresh_from_db()
        self.assertEqual(alert.name, self.label)
        self.assertEqual(alert.message, self.message)
        self.assertTrue(alert.status)
        self.assertEqual(alert.style, 'primary')
        self.assertIsNone(alert.dismissible)
        self.assertFalse(alert.scheduled_alert)
        self.assertIsNone(alert.scheduled_start)
        self.assertIsNone(alert.scheduled_end)

    def test_create_with_options(self):
        alert = self.service.create(self.label, self.message, {
            'style': 'warning',
            'status': False,
            'dismissible': True,
        })
        alert.refresh_from_db()
        self.assertEqual(alert.style, 'warning')
        self.assertFalse(alert.status)
        self.assertTrue(alert.dismissible)

    def test_create_scheduled(self):
        alert = self.service.create(self.label, self.message, {
            'start': '2030-10-15T15:00:00',
            'end': '2030-10-15T17:00:00',
        })
        alert.refresh_from_db()
        self.assertTrue(alert.scheduled_alert)
        self.assertEqual(alert.scheduled_start, datetime(2030, 10, 15, 15, tzinfo=UTC))
        self.assertEqual(alert.scheduled_end, datetime(2030, 10, 15, 17, tzinfo=UTC))

    def test_create_end_without_start(self):
        alert = self.service.create(self.label, self.message, {'end': '15 minutes'})
        alert.refresh_from_db()
        self.assertTrue(alert.scheduled_alert)
        self.assertEqual(alert.scheduled_start, self.now)
        self.assertEqual(alert.scheduled_end, self.now + timedelta(minutes=15))

    def test_create_invalid_input_persists_nothing(self):
        invalid = [
            ('', self.message, {}),
            (self.label, '', {}),
            (self.label, self.message, {'start': 'whenever'}),
            (self.label, self.message, {'style': 'purple'}),
            (self.label, self.message, {'style': 'Warning'}),
            (self.label, self.message, {'status': 'true'}),
        ]
        for label, message, options in invalid:
            with self.subTest(options=options):
                with self.assertRaises(InvalidArgument):
                    self.service.create(label, message, options)
        self.assertEqual(SitewideAlert.objects.count(), 0)

    def test_create_then_delete(self):
        self.service.create(self.label, self.message)
        self.assertEqual(self.service.delete(self.label), 1)
        self.assertEqual(SitewideAlert.objects.count(), 0)

    def test_delete_all_matching_labels(self):
        self.service.create(self.label, self.message)
        self.service.create(self.label, self.message, {'status': False})
        self.service.create('another-alert', self.message)

        self.assertEqual(self.service.delete(self.label), 2)
        self.assertEqual(
            list(SitewideAlert.objects.values_list('name', flat=True)),
            ['another-alert']
        )

    def test_delete_unknown_label(self):
        self.service.create(self.label, self.message)
        with patch.object(self.service.repository, 'delete_many') as delete_many:
            self.assertEqual(self.service.delete('no-such-label'), 0)
        delete_many.assert_not_called()
        self.assertEqual(SitewideAlert.objects.count(), 1)

    def test_delete_requires_label(self):
        with self.assertRaises(InvalidArgument) as cm:
            self.service.delete('')
        self.assertEqual(str(cm.exception), 'A label is required.')

    def test_disable_all(self):
        self.service.create(self.label, self.message)
        self.service.create('automated-test-alert-2', 'Another test sitewide alert.')

        self.assertEqual(self.service.disable(), 2)
        self.assertEqual(SitewideAlert.objects.count(), 2)
        self.assertFalse(SitewideAlert.objects.active().exists())

    def test_disable_all_with_nothing_active(self):
        self.assertEqual(self.service.disable(), 0)
        self.assertEqual(self.service.disable(''), 0)

    def test_disable_with_label(self):
        self.service.create(self.label, self.message)
        self.service.create('other', self.message)

        self.assertEqual(self.service.disable(self.label), 1)
        self.assertFalse(SitewideAlert.objects.get(name=self.label).status)
        self.assertTrue(SitewideAlert.objects.get(name='other').status)

    def test_disable_already_inactive(self):
        self.service.create(self.label, self.message)
        self.service.disable(self.label)

        with self.assertRaises(InvalidArgument) as cm:
            self.service.disable(self.label)
        self.assertEqual(
            str(cm.exception),
            "No active sitewide alerts found with the label 'automated-test-alert'."
        )

    def test_disable_label_match_is_case_sensitive(self):
        self.service.create(self.label, self.message)
        with self.assertRaises(InvalidArgument):
            self.service.disable(self.label.upper())

    def test_disable_partial_failure_keeps_earlier_updates(self):
        self.service.create('first', self.message)
        self.service.create('second', self.message)
        service = SitewideAlertCommands(
            FailingUpdateRepository(fail_on=2), storage_timezone=UTC
        )

        with self.assertRaises(StorageError):
            service.disable()

        self.assertFalse(SitewideAlert.objects.get(name='first').status)
        self.assertTrue(SitewideAlert.objects.get(name='second').status)

    def test_enable(self):
        self.service.create(self.label, self.message, {'status': False})
        self.service.create(self.label, self.message, {'status': False})

        self.assertEqual(self.service.enable(self.label), 2)
        self.assertEqual(SitewideAlert.objects.active().count(), 2)

    def test_enable_requires_inactive_alerts(self):
        self.service.create(self.label, self.message)
        for label in [self.label, 'no-such-label', '']:
            with self.subTest(label=label):
                with self.assertRaises(InvalidArgument) as cm:
                    self.service.enable(label)
                self.assertIn('No inactive sitewide alerts found', str(cm.exception))

    def test_enable_disable_cycle(self):
        self.service.create(self.label, self.message)
        self.assertEqual(self.service.disable(self.label), 1)
        self.assertEqual(self.service.enable(self.label), 1)
        self.assertTrue(SitewideAlert.objects.get(name=self.label).status)

    def test_storage_errors_propagate(self):
        with patch.object(SitewideAlert.objects, 'create', side_effect=DatabaseError('DB Error')):
            with self.assertRaises(StorageError):
                self.service.create(self.label, self.message)

    def test_create_reads_dates_in_service_timezone(self):
        service = SitewideAlertCommands(
            DjangoAlertRepository(storage_timezone=UTC),
            storage_timezone=ZoneInfo('America/Chicago'),
            clock=lambda: self.now,
        )

        alert = service.create(self.label, self.message, {
            'start': '2030-06-01 12:00',
            'end': '2030-06-01 14:00',
        })
        alert.refresh_from_db()
        self.assertEqual(alert.scheduled_start, datetime(2030, 6, 1, 17, 0, tzinfo=UTC))
        self.assertEqual(alert.scheduled_end, datetime(2030, 6, 1, 19, 0, tzinfo=UTC))

    @override_settings(SITEWIDE_ALERT_STORAGE_TIMEZONE='America/Chicago')
    def test_get_cli_service_shares_timezone(self):
        service = get_cli_service()
        self.assertEqual(service.storage_timezone, ZoneInfo('America/Chicago'))
        self.assertEqual(service.repository.storage_timezone, service.storage_timezone)


class SitewideAlertAdminTest(TestCase):
    """Test the admin actions"""

    def setUp(self):
        self.admin = SitewideAlertAdmin(SitewideAlert, AdminSite())
        self.request = RequestFactory().post('/admin/sitewide_alerts/sitewidealert/')
        SitewideAlert.objects.create(name='on', message='m')
        SitewideAlert.objects.create(name='off', message='m', status=False)
        SitewideAlert.objects.create(name='also-off', message='m', status=False)

    def test_enable_alerts(self):
        with patch.object(self.admin, 'message_user') as message_user:
            self.admin.enable_alerts(self.request, SitewideAlert.objects.all())

        message_user.assert_called_once_with(self.request, '2 alerts enabled.')
        self.assertEqual(SitewideAlert.objects.active().count(), 3)

    def test_disable_alerts(self):
        queryset = SitewideAlert.objects.filter(name__in=['on', 'off'])
        with patch.object(self.admin, 'message_user') as message_user:
            self.admin.disable_alerts(self.request, queryset)

        message_user.assert_called_once_with(self.request, '1 alerts disabled.')
        self.assertFalse(SitewideAlert.objects.active().exists())

    def test_status_badge(self):
        self.assertIn('Active', self.admin.status_badge(SitewideAlert.objects.get(name='on')))
        self.assertIn('Inactive', self.admin.status_badge(SitewideAlert.objects.get(name='off')))

        scheduled = SitewideAlert.objects.create(
            name='later', message='m', scheduled_alert=True,
            scheduled_start=timezone.now() + timedelta(days=1),
        )
        self.assertIn('Scheduled', self.admin.status_badge(scheduled))
