"""
Sitewide Alert Models
"""
from datetime import datetime
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone

from .conf import DEFAULT_STYLE, get_alert_styles


class SitewideAlertQuerySet(models.QuerySet):
    """Custom QuerySet for SitewideAlert with label and status filtering."""

    def active(self) -> 'SitewideAlertQuerySet':
        return self.filter(status=True)

    def inactive(self) -> 'SitewideAlertQuerySet':
        return self.filter(status=False)

    def with_label(self, label: str) -> 'SitewideAlertQuerySet':
        """Exact, case-sensitive match on the label."""
        return self.filter(name=label)

    def visible(self, now: Optional[datetime] = None) -> 'SitewideAlertQuerySet':
        """Active alerts whose schedule, if any, includes ``now``."""
        now = now or timezone.now()
        in_window = (
            (Q(scheduled_start__isnull=True) | Q(scheduled_start__lte=now))
            & (Q(scheduled_end__isnull=True) | Q(scheduled_end__gt=now))
        )
        return self.active().filter(Q(scheduled_alert=False) | in_window)


class SitewideAlert(models.Model):
    """An alert shown across the whole site."""
    name = models.CharField(
        max_length=255,
        db_index=True,
        help_text='Internal label; not shown to visitors and not unique'
    )
    message = models.TextField()
    status = models.BooleanField(default=True, help_text='Whether the alert is active')
    style = models.CharField(max_length=64, default=DEFAULT_STYLE)
    dismissible = models.BooleanField(null=True, blank=True)

    # Scheduling
    scheduled_alert = models.BooleanField(default=False)
    scheduled_start = models.DateTimeField(null=True, blank=True)
    scheduled_end = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = SitewideAlertQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['name', 'status'], name='sitewide_alert_name_status_idx'),
        ]

    def __str__(self):
        state = 'active' if self.status else 'inactive'
        return f"{self.name} ({state})"

    def clean(self):
        errors = {}
        styles = get_alert_styles()
        if self.style not in styles:
            errors['style'] = f"Style must be one of {', '.join(styles)}."
        if self.scheduled_alert and not (self.scheduled_start or self.scheduled_end):
            errors['scheduled_alert'] = 'A scheduled alert needs a start or an end date.'
        if (
            self.scheduled_start and self.scheduled_end
            and self.scheduled_end < self.scheduled_start
        ):
            errors['scheduled_end'] = 'The end date must not be before the start date.'
        if errors:
            raise ValidationError(errors)

    def is_visible(self, now: Optional[datetime] = None) -> bool:
        """Check whether the alert should currently be shown"""
        if not self.status:
            return False
        if not self.scheduled_alert:
            return True

        now = now or timezone.now()
        if self.scheduled_start and now < self.scheduled_start:
            return False
        if self.scheduled_end and now >= self.scheduled_end:
            return False
        return True
