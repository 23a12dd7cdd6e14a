"""
Sitewide Alerts app configuration.
"""

from django.apps import AppConfig


class SitewideAlertsConfig(AppConfig):
    """Configuration for the Sitewide Alerts application."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'sitewide_alerts'
    verbose_name = 'Sitewide Alerts'
