"""
Storage access for sitewide alerts.

``AlertRepository`` is the interface the command service depends on;
``DjangoAlertRepository`` implements it with the Django ORM.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence

from django.db import DatabaseError

from .conf import get_storage_timezone
from .dates import parse_storage_value
from .exceptions import StorageError
from .models import SitewideAlert

logger = logging.getLogger(__name__)


class AlertRepository(ABC):
    """Exact-match lookups and writes for alert records."""

    @abstractmethod
    def find_by_label(self, label: str) -> List[SitewideAlert]:
        """All alerts with exactly this label, whatever their status."""

    @abstractmethod
    def find_by_label_and_status(self, label: str, status: bool) -> List[SitewideAlert]:
        """Alerts with exactly this label and status."""

    @abstractmethod
    def find_by_status(self, status: bool) -> List[SitewideAlert]:
        """All alerts with the given status."""

    @abstractmethod
    def insert(self, values: Dict[str, Any]) -> SitewideAlert:
        """Create and persist a new alert from field values."""

    @abstractmethod
    def update(self, alert: SitewideAlert) -> None:
        """Persist changes to an existing alert."""

    @abstractmethod
    def delete_many(self, alerts: Sequence[SitewideAlert]) -> int:
        """Delete the given alerts, returning how many were removed."""


class DjangoAlertRepository(AlertRepository):
    """AlertRepository backed by ``SitewideAlert.objects``."""

    def __init__(self, storage_timezone=None):
        self.storage_timezone = storage_timezone or get_storage_timezone()

    def find_by_label(self, label: str) -> List[SitewideAlert]:
        if not label:
            return []
        try:
            return list(SitewideAlert.objects.with_label(label).order_by('pk'))
        except DatabaseError as e:
            raise StorageError('find_by_label', e) from e

    def find_by_label_and_status(self, label: str, status: bool) -> List[SitewideAlert]:
        if not label:
            return []
        try:
            return list(
                SitewideAlert.objects.with_label(label).filter(status=status).order_by('pk')
            )
        except DatabaseError as e:
            raise StorageError('find_by_label_and_status', e) from e

    def find_by_status(self, status: bool) -> List[SitewideAlert]:
        try:
            return list(SitewideAlert.objects.filter(status=status).order_by('pk'))
        except DatabaseError as e:
            raise StorageError('find_by_status', e) from e

    def insert(self, values: Dict[str, Any]) -> SitewideAlert:
        values = dict(values)
        # Scheduled dates arrive in the canonical storage format.
        for field in ('scheduled_start', 'scheduled_end'):
            if isinstance(values.get(field), str):
                values[field] = parse_storage_value(values[field], self.storage_timezone)

        try:
            return SitewideAlert.objects.create(**values)
        except DatabaseError as e:
            logger.error(f"Failed to save sitewide alert '{values.get('name')}': {e}")
            raise StorageError('insert', e) from e

    def update(self, alert: SitewideAlert) -> None:
        try:
            alert.save()
        except DatabaseError as e:
            logger.error(f"Failed to update sitewide alert {alert.pk}: {e}")
            raise StorageError('update', e) from e

    def delete_many(self, alerts: Sequence[SitewideAlert]) -> int:
        ids = [alert.pk for alert in alerts]
        if not ids:
            return 0
        try:
            deleted, _ = SitewideAlert.objects.filter(pk__in=ids).delete()
        except DatabaseError as e:
            logger.error(f"Failed to delete sitewide alerts {ids}: {e}")
            raise StorageError('delete_many', e) from e
        return deleted
