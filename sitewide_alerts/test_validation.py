"""
Tests for sitewide alert input validation and date parsing.
"""
from datetime import datetime, timedelta, timezone as dt_timezone
from zoneinfo import ZoneInfo

from django.test import SimpleTestCase, override_settings

from .conf import get_alert_styles, parse_styles
from .dates import format_for_storage, parse_datetime_input, parse_storage_value
from .exceptions import InvalidArgument
from .validation import AlertOptions, normalize_style, validate_create_input

UTC = dt_timezone.utc
# A Tuesday.
NOW = datetime(2030, 1, 1, 12, 0, tzinfo=UTC)


class ParseStylesTests(SimpleTestCase):
    """Test style configuration parsing."""

    def test_parse_line_format(self):
        styles = parse_styles("primary|Default\n\nInfo|Information\nwarning")
        self.assertEqual(list(styles), ['primary', 'info', 'warning'])
        self.assertEqual(styles['info'], 'Information')
        self.assertEqual(styles['warning'], 'Warning')

    def test_parse_mapping(self):
        styles = parse_styles({'Primary': 'Default', 'danger': 'Danger'})
        self.assertEqual(styles, {'primary': 'Default', 'danger': 'Danger'})

    @override_settings(SITEWIDE_ALERT_STYLES={'info': 'Info'})
    def test_primary_always_available(self):
        self.assertEqual(list(get_alert_styles()), ['primary', 'info'])


class ParseDatetimeInputTests(SimpleTestCase):
    """Test free-form date parsing."""

    def parse(self, value, tz=UTC):
        return format_for_storage(parse_datetime_input(value, tz, now=NOW), tz)

    def test_iso_formats(self):
        self.assertEqual(self.parse('2022-10-15T15:00:00'), '2022-10-15T15:00:00')
        self.assertEqual(self.parse('2022-10-15 15:00'), '2022-10-15T15:00:00')
        self.assertEqual(self.parse('2020-10-22T14:30:00-05:00'), '2020-10-22T19:30:00')
        self.assertEqual(self.parse('2022-10-15'), '2022-10-15T00:00:00')

    def test_keywords(self):
        self.assertEqual(self.parse('now'), '2030-01-01T12:00:00')
        self.assertEqual(self.parse('midnight'), '2030-01-01T00:00:00')
        self.assertEqual(self.parse('noon'), '2030-01-01T12:00:00')
        self.assertEqual(self.parse('tomorrow'), '2030-01-02T00:00:00')
        self.assertEqual(self.parse('tomorrow 13:45'), '2030-01-02T13:45:00')
        self.assertEqual(self.parse('Yesterday noon'), '2029-12-31T12:00:00')

    def test_time_of_day(self):
        self.assertEqual(self.parse('13:45'), '2030-01-01T13:45:00')

    def test_weekdays(self):
        self.assertEqual(self.parse('Saturday'), '2030-01-05T00:00:00')
        self.assertEqual(self.parse('saturday 12:30'), '2030-01-05T12:30:00')
        # Today counts as the next occurrence.
        self.assertEqual(self.parse('Tuesday'), '2030-01-01T00:00:00')

    def test_month_names(self):
        self.assertEqual(self.parse('October 22, 2020'), '2020-10-22T00:00:00')
        self.assertEqual(self.parse('22 October 2020'), '2020-10-22T00:00:00')
        self.assertEqual(self.parse('Oct 22 2020'), '2020-10-22T00:00:00')

    def test_relative_offsets(self):
        self.assertEqual(self.parse('+6 hours'), '2030-01-01T18:00:00')
        self.assertEqual(self.parse('15 minutes'), '2030-01-01T12:15:00')
        self.assertEqual(self.parse('2 hours 30 minutes'), '2030-01-01T14:30:00')
        self.assertEqual(self.parse('-1 day'), '2029-12-31T12:00:00')
        self.assertEqual(self.parse('3 days ago'), '2029-12-29T12:00:00')
        self.assertEqual(self.parse('1 week'), '2030-01-08T12:00:00')

    def test_compact_relative_offsets(self):
        self.assertEqual(self.parse('2hours30minutes'), '2030-01-01T14:30:00')
        self.assertEqual(self.parse('+6hours'), '2030-01-01T18:00:00')
        self.assertEqual(self.parse('1day2hrs'), '2030-01-02T14:00:00')
        self.assertEqual(self.parse('5mins ago'), '2030-01-01T11:55:00')

    def test_unknown_relative_units_rejected(self):
        for value in ['2hoursx', '2 hours 30', '3 fortnights', '2hours30']:
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    parse_datetime_input(value, UTC, now=NOW)

    def test_invalid_values(self):
        for value in ['', '   ', 'not a date', '2022-13-45', 'tomorrow at lunch', '25:99']:
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    parse_datetime_input(value, UTC, now=NOW)

    def test_naive_input_uses_storage_timezone(self):
        chicago = ZoneInfo('America/Chicago')
        self.assertEqual(self.parse('2030-06-01 12:00', tz=chicago), '2030-06-01T12:00:00')
        self.assertEqual(self.parse('2030-06-01T12:00:00+00:00', tz=chicago), '2030-06-01T07:00:00')

    def test_storage_value_round_trip(self):
        parsed = parse_datetime_input('2020-10-22T14:30:00-05:00', UTC, now=NOW)
        stored = format_for_storage(parsed, UTC)
        self.assertEqual(parse_storage_value(stored, UTC), parsed)


class NormalizeStyleTests(SimpleTestCase):
    """Test style normalisation."""

    def test_known_styles_are_normalized(self):
        self.assertEqual(normalize_style('warning'), 'warning')
        self.assertEqual(normalize_style('  DANGER '), 'danger')

    def test_unknown_styles_fall_back_to_primary(self):
        for value in ['', 'purple', None, 42]:
            with self.subTest(value=value):
                self.assertEqual(normalize_style(value), 'primary')

    def test_custom_style_map(self):
        self.assertEqual(normalize_style('brand', {'primary': 'Default', 'brand': 'Brand'}), 'brand')


class ValidateCreateInputTests(SimpleTestCase):
    """Test validation of create input."""

    def validate(self, options=None, label='automated-test-alert', message='A sitewide alert test.'):
        return validate_create_input(label, message, options, storage_timezone=UTC, now=NOW)

    def test_minimal_input(self):
        normalized = self.validate()
        self.assertIsNone(normalized.start)
        self.assertIsNone(normalized.end)
        self.assertIsNone(normalized.status)
        self.assertIsNone(normalized.style)
        self.assertIsNone(normalized.dismissible)
        self.assertFalse(normalized.scheduled)

    def test_label_required(self):
        with self.assertRaises(InvalidArgument) as cm:
            self.validate(label='')
        self.assertEqual(str(cm.exception), 'A label is required.')

    def test_message_required(self):
        with self.assertRaises(InvalidArgument) as cm:
            self.validate(message='')
        self.assertEqual(str(cm.exception), 'A message is required.')

    def test_dates_are_converted_to_storage_format(self):
        normalized = self.validate({
            'start': '2030-10-15 15:00',
            'end': 'October 16, 2030',
        })
        self.assertEqual(normalized.start, '2030-10-15T15:00:00')
        self.assertEqual(normalized.end, '2030-10-16T00:00:00')
        self.assertTrue(normalized.scheduled)

    def test_end_without_start_starts_now(self):
        normalized = self.validate({'end': '2031-10-15T15:00:00'})
        self.assertEqual(normalized.start, '2030-01-01T12:00:00')
        self.assertEqual(normalized.end, '2031-10-15T15:00:00')
        self.assertLessEqual(normalized.start, normalized.end)

    def test_invalid_dates(self):
        for option in ['start', 'end']:
            with self.subTest(option=option):
                with self.assertRaises(InvalidArgument) as cm:
                    self.validate({option: 'not a date'})
                self.assertEqual(str(cm.exception), f"Invalid date format for '{option}' option.")

    def test_status_must_be_boolean(self):
        self.assertFalse(self.validate({'status': False}).status)
        with self.assertRaises(InvalidArgument) as cm:
            self.validate({'status': 'yes'})
        self.assertIn("'status' option should be a boolean", str(cm.exception))

    def test_dismissible_must_be_boolean(self):
        self.assertTrue(self.validate({'dismissible': True}).dismissible)
        with self.assertRaises(InvalidArgument) as cm:
            self.validate({'dismissible': 1})
        self.assertIn("'dismissible' option should be a boolean", str(cm.exception))

    def test_style_is_validated(self):
        self.assertEqual(self.validate({'style': 'warning'}).style, 'warning')
        self.assertEqual(self.validate({'style': 'info'}).style, 'info')
        self.assertIsNone(self.validate({'style': ''}).style)

    def test_style_match_is_exact(self):
        for value in ['Warning', ' DANGER ', 'info ', 42]:
            with self.subTest(value=value):
                with self.assertRaises(InvalidArgument) as cm:
                    self.validate({'style': value})
                self.assertIn("The 'style' option should be one of", str(cm.exception))

    def test_unknown_style_rejected(self):
        with self.assertRaises(InvalidArgument) as cm:
            self.validate({'style': 'purple'})
        self.assertEqual(
            str(cm.exception),
            "The 'style' option should be one of primary,info,success,warning,danger."
        )

    def test_label_checked_before_options(self):
        with self.assertRaises(InvalidArgument) as cm:
            self.validate({'style': 'purple'}, label='')
        self.assertEqual(str(cm.exception), 'A label is required.')

    def test_input_is_not_mutated(self):
        options = {'end': '2031-10-15T15:00:00', 'unrelated': 'ignored'}
        self.validate(options)
        self.assertEqual(options, {'end': '2031-10-15T15:00:00', 'unrelated': 'ignored'})

    def test_accepts_alert_options(self):
        normalized = self.validate(AlertOptions(start='+1 hour', style='danger'))
        self.assertEqual(normalized.start, '2030-01-01T13:00:00')
        self.assertEqual(normalized.style, 'danger')

    def test_defaults_now_to_current_time(self):
        before = datetime.now(UTC).replace(microsecond=0)
        normalized = validate_create_input(
            'label', 'message', {'end': '+1 day'}, storage_timezone=UTC
        )
        after = datetime.now(UTC) + timedelta(seconds=1)
        start = parse_storage_value(normalized.start, UTC)
        self.assertTrue(before <= start <= after)
        self.assertLess(start, parse_storage_value(normalized.end, UTC))
