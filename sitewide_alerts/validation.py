"""
Validation and normalisation of input for creating sitewide alerts.
"""
from dataclasses import dataclass, fields
from datetime import datetime, tzinfo
from typing import Any, Dict, Mapping, Optional, Union

from django.utils import timezone

from .conf import DEFAULT_STYLE, get_alert_styles, get_storage_timezone
from .dates import format_for_storage, to_storage_format
from .exceptions import InvalidArgument


@dataclass(frozen=True)
class AlertOptions:
    """Optional values for a new alert, as entered by the user."""
    start: Optional[str] = None
    end: Optional[str] = None
    status: Any = None
    style: Any = None
    dismissible: Any = None

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]]) -> 'AlertOptions':
        """Build options from a dict, ignoring keys that are not alert options."""
        if not options:
            return cls()
        names = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in options.items() if key in names})


@dataclass(frozen=True)
class NormalizedAlertOptions:
    """Validated options; dates are in canonical storage format."""
    start: Optional[str] = None
    end: Optional[str] = None
    status: Optional[bool] = None
    style: Optional[str] = None
    dismissible: Optional[bool] = None

    @property
    def scheduled(self) -> bool:
        return bool(self.start or self.end)


def normalize_style(style: Any = DEFAULT_STYLE, styles: Optional[Mapping[str, str]] = None) -> str:
    """Trim and lower-case a style, falling back to 'primary' when unknown."""
    if styles is None:
        styles = get_alert_styles()
    if not isinstance(style, str):
        return DEFAULT_STYLE

    style = style.strip().lower()
    if style not in styles:
        style = DEFAULT_STYLE
    return style


def validate_create_input(
    label: str,
    message: str,
    options: Union[AlertOptions, Mapping[str, Any], None] = None,
    *,
    styles: Optional[Mapping[str, str]] = None,
    storage_timezone: Optional[tzinfo] = None,
    now: Optional[datetime] = None,
) -> NormalizedAlertOptions:
    """
    Validate the arguments for creating an alert.

    Returns a new ``NormalizedAlertOptions`` with ``start`` and ``end``
    converted to the storage format. When only ``end`` is given, ``start``
    defaults to now. Raises ``InvalidArgument`` on the first invalid value.
    """
    if not isinstance(options, AlertOptions):
        options = AlertOptions.from_mapping(options)
    if styles is None:
        styles = get_alert_styles()
    if storage_timezone is None:
        storage_timezone = get_storage_timezone()

    if not label:
        raise InvalidArgument('A label is required.')

    if not message:
        raise InvalidArgument('A message is required.')

    dates: Dict[str, Optional[str]] = {'start': None, 'end': None}
    for option in ('start', 'end'):
        value = getattr(options, option)
        if not value:
            continue
        try:
            dates[option] = to_storage_format(value, storage_timezone, now=now)
        except (TypeError, ValueError, OverflowError):
            raise InvalidArgument(f"Invalid date format for '{option}' option.")

    # Only an end time was passed: the alert starts now.
    if dates['end'] and not dates['start']:
        dates['start'] = format_for_storage(now or timezone.now(), storage_timezone)

    if options.status is not None and not isinstance(options.status, bool):
        raise InvalidArgument("The 'status' option should be a boolean value.")

    style = options.style
    if style:
        if not isinstance(style, str) or style not in styles:
            raise InvalidArgument(
                f"The 'style' option should be one of {','.join(styles)}."
            )
    else:
        style = None

    if options.dismissible is not None and not isinstance(options.dismissible, bool):
        raise InvalidArgument("The 'dismissible' option should be a boolean value.")

    return NormalizedAlertOptions(
        start=dates['start'],
        end=dates['end'],
        status=options.status,
        style=style,
        dismissible=options.dismissible,
    )
