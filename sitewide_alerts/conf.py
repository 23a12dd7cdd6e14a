"""
Settings access for sitewide alerts.

Styles may be configured either as a mapping of ``{key: label}`` or as a
string of ``key|Label`` lines, one style per line.
"""
from typing import Dict, Mapping, Union
from zoneinfo import ZoneInfo

from django.conf import settings

DATETIME_STORAGE_FORMAT = '%Y-%m-%dT%H:%M:%S'
DEFAULT_STYLE = 'primary'

DEFAULT_STYLES = (
    "primary|Default\n"
    "info|Info\n"
    "success|Success\n"
    "warning|Warning\n"
    "danger|Danger"
)


def parse_styles(value: Union[str, Mapping[str, str]]) -> Dict[str, str]:
    """Parse a style definition into an ordered ``{key: label}`` dict."""
    if isinstance(value, Mapping):
        return {str(key).strip().lower(): str(label) for key, label in value.items()}

    styles = {}
    for line in value.splitlines():
        line = line.strip()
        if not line:
            continue
        key, _, label = line.partition('|')
        key = key.strip().lower()
        if key:
            styles[key] = label.strip() or key.capitalize()
    return styles


def get_alert_styles() -> Dict[str, str]:
    """Return the configured alert styles, keyed by machine name."""
    styles = parse_styles(getattr(settings, 'SITEWIDE_ALERT_STYLES', DEFAULT_STYLES))
    if DEFAULT_STYLE not in styles:
        # primary is the fallback for every normalised style
        styles = {DEFAULT_STYLE: 'Default', **styles}
    return styles


def get_storage_timezone() -> ZoneInfo:
    """Return the timezone scheduled dates are stored in."""
    return ZoneInfo(getattr(settings, 'SITEWIDE_ALERT_STORAGE_TIMEZONE', 'UTC'))
