"""
Sitewide Alert Services

Shared logic behind the sitewide alert management commands.
"""
import logging
from datetime import datetime, tzinfo
from typing import Any, Callable, Mapping, Optional, Union

from django.utils import timezone

from .conf import DEFAULT_STYLE, get_alert_styles, get_storage_timezone
from .dates import parse_storage_value
from .exceptions import InvalidArgument
from .models import SitewideAlert
from .repository import AlertRepository, DjangoAlertRepository
from .validation import AlertOptions, normalize_style, validate_create_input

logger = logging.getLogger(__name__)


class SitewideAlertCommands:
    """Create, delete, enable and disable sitewide alerts."""

    def __init__(
        self,
        repository: AlertRepository,
        *,
        styles: Optional[Mapping[str, str]] = None,
        storage_timezone: Optional[tzinfo] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.repository = repository
        self.styles = styles if styles is not None else get_alert_styles()
        self.storage_timezone = storage_timezone or get_storage_timezone()
        self.clock = clock or timezone.now

    def create(
        self,
        label: str,
        message: str,
        options: Union[AlertOptions, Mapping[str, Any], None] = None,
    ) -> SitewideAlert:
        """
        Create a new sitewide alert.

        Options may set ``start`` and ``end`` (ISO 8601 or human-readable),
        ``status`` (defaults to active), ``style`` (defaults to 'primary')
        and ``dismissible``.
        """
        normalized = validate_create_input(
            label,
            message,
            options,
            styles=self.styles,
            storage_timezone=self.storage_timezone,
            now=self.clock(),
        )

        values = {
            'name': label,
            'message': message,
            'status': True if normalized.status is None else normalized.status,
            'style': normalize_style(normalized.style or DEFAULT_STYLE, self.styles),
            'dismissible': normalized.dismissible,
        }
        if normalized.scheduled:
            values['scheduled_alert'] = True
            # Canonical strings are read back in this service's timezone.
            values['scheduled_start'] = parse_storage_value(normalized.start, self.storage_timezone)
            values['scheduled_end'] = (
                parse_storage_value(normalized.end, self.storage_timezone)
                if normalized.end else None
            )

        alert = self.repository.insert(values)
        logger.info(f"Created sitewide alert '{label}' (id={alert.pk})")
        return alert

    def delete(self, label: str) -> int:
        """Delete every alert with this label. Returns the number deleted."""
        if not label:
            raise InvalidArgument('A label is required.')

        alerts = self.repository.find_by_label(label)
        if not alerts:
            return 0

        count = self.repository.delete_many(alerts)
        logger.info(f"Deleted {count} sitewide alert(s) labelled '{label}'")
        return count

    def disable(self, label: Optional[str] = None) -> int:
        """
        Disable the active alerts with this label, or all active alerts.

        Each alert is saved on its own; a failure part way through leaves the
        alerts handled so far disabled.
        """
        if not label:
            alerts = self.repository.find_by_status(True)
        else:
            alerts = self.repository.find_by_label_and_status(label, True)
            if not alerts:
                raise InvalidArgument(
                    f"No active sitewide alerts found with the label '{label}'."
                )

        return self._set_status(alerts, False)

    def enable(self, label: str) -> int:
        """Enable the inactive alerts with this label."""
        alerts = self.repository.find_by_label_and_status(label, False) if label else []
        if not alerts:
            raise InvalidArgument(
                f"No inactive sitewide alerts found with the label '{label}'."
            )

        return self._set_status(alerts, True)

    def _set_status(self, alerts, status: bool) -> int:
        count = 0
        for alert in alerts:
            alert.status = status
            self.repository.update(alert)
            count += 1
            logger.info(
                f"{'Enabled' if status else 'Disabled'} sitewide alert '{alert.name}' (id={alert.pk})"
            )
        return count


def get_cli_service() -> SitewideAlertCommands:
    """Build the service used by the management commands."""
    storage_timezone = get_storage_timezone()
    return SitewideAlertCommands(
        DjangoAlertRepository(storage_timezone=storage_timezone),
        storage_timezone=storage_timezone,
    )
