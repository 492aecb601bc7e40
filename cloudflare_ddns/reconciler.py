"""Record reconciliation: bring one DNS record in line with a resolved address."""

import logging
from enum import Enum

from .providers.base import (
    DNSProvider,
    DNSProviderError,
    DNSRecord,
    DNSRecordSelector,
)
from .utils.ip import ResolvedAddress

logger = logging.getLogger(__name__)


class ReconcileOutcome(str, Enum):
    """Result of reconciling one record"""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    FAILED = "failed"

    @property
    def succeeded(self) -> bool:
        return self is not ReconcileOutcome.FAILED


class RecordReconciler:
    """
    Creates or updates the record matching a selector.

    Only the first record returned for a selector is compared and updated.
    Duplicate records for the same name and type are left alone.
    """

    def __init__(self, provider: DNSProvider, ttl: int = 1, dry_run: bool = False):
        self.provider = provider
        self.ttl = ttl
        self.dry_run = dry_run
        self.logger = logging.getLogger(__name__)

    def reconcile(
        self, zone_id: str, selector: DNSRecordSelector, address: ResolvedAddress
    ) -> ReconcileOutcome:
        """
        Ensure the record for selector holds address.

        Args:
            zone_id: Zone identifier
            selector: Record name and type
            address: Desired record content

        Returns:
            CREATED, UPDATED or UNCHANGED on success, FAILED otherwise
        """
        content = str(address)

        try:
            existing = self.provider.list_records(zone_id, selector)
        except DNSProviderError as e:
            self.logger.error(f"Unable to look up {selector}: {e}")
            return ReconcileOutcome.FAILED

        if not existing:
            self.logger.debug(f"{selector.type.value} record not found, creating new record with IP")
            return self._create(zone_id, selector, content)

        current = existing[0]
        self.logger.debug(f"{selector.type.value} record found")
        if len(existing) > 1:
            self.logger.debug(
                f"{len(existing)} records match {selector}, only {current.record_id} is managed"
            )

        if current.content == content:
            self.logger.debug(
                f"{selector.type.value} record IP is same as current IP, no need to update"
            )
            return ReconcileOutcome.UNCHANGED

        return self._update(zone_id, current, content)

    def _create(self, zone_id: str, selector: DNSRecordSelector, content: str) -> ReconcileOutcome:
        record = DNSRecord(
            name=selector.name, type=selector.type, content=content, ttl=self.ttl
        )
        self.logger.info(f"Creating {selector} = {content}")

        if self.dry_run:
            self.logger.info("[DRY RUN] Would create record")
            return ReconcileOutcome.CREATED

        try:
            self.provider.create_record(zone_id, record)
        except DNSProviderError as e:
            if e.errors:
                for error in e.errors:
                    self.logger.error(f"Provider error {error.get('code')}: {error.get('message')}")
            else:
                self.logger.error(str(e))
            self.logger.error(f"Unable to create {selector.type.value} record")
            return ReconcileOutcome.FAILED

        self.logger.debug(f"{selector.type.value} record created successfully")
        return ReconcileOutcome.CREATED

    def _update(self, zone_id: str, current: DNSRecord, content: str) -> ReconcileOutcome:
        self.logger.info(
            f"Updating {current.selector}: {current.content} -> {content}"
        )

        if self.dry_run:
            self.logger.info("[DRY RUN] Would update record")
            return ReconcileOutcome.UPDATED

        record = DNSRecord(
            name=current.name,
            type=current.type,
            content=content,
            ttl=current.ttl,
            proxied=current.proxied,
            record_id=current.record_id,
        )
        try:
            self.provider.update_record(zone_id, record)
        except DNSProviderError as e:
            self.logger.error(f"Unable to update {current.selector}: {e}")
            return ReconcileOutcome.FAILED

        self.logger.debug(f"{current.type.value} record updated successfully")
        return ReconcileOutcome.UPDATED
