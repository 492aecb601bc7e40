"""Main update loop: resolve public addresses and reconcile A/AAAA records."""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from .config import DDNSConfig
from .providers.base import (
    DNSProvider,
    DNSProviderError,
    DNSRecordSelector,
    RecordType,
)
from .providers.cloudflare import CloudflareConfig, CloudflareProvider
from .reconciler import ReconcileOutcome, RecordReconciler
from .utils.ip import AddressResolver, IPFamily, ResolutionError

ProviderFactory = Callable[[DDNSConfig], DNSProvider]


class FatalUpdateError(Exception):
    """Setup failure that stops the update loop"""


def create_provider(config: DDNSConfig) -> DNSProvider:
    """Build the Cloudflare provider from updater config"""
    return CloudflareProvider(
        CloudflareConfig(
            api_key=config.api_key,
            email=config.email,
            timeout=config.http_timeout,
        )
    )


@dataclass
class UpdaterSession:
    """State resolved once and reused across ticks"""

    provider: Optional[DNSProvider] = None
    zone_id: Optional[str] = None


@dataclass
class TickResult:
    """Per-family outcome of one tick, None when skipped or unresolved"""

    a: Optional[ReconcileOutcome] = None
    aaaa: Optional[ReconcileOutcome] = None

    @property
    def a_succeeded(self) -> bool:
        return self.a is not None and self.a.succeeded

    @property
    def aaaa_succeeded(self) -> bool:
        return self.aaaa is not None and self.aaaa.succeeded


class DDNSUpdater:
    """
    Dynamic DNS update loop.

    Each tick resolves the public IPv4 and IPv6 address and reconciles the
    A and AAAA records of the configured hostname. The two families are
    independent: a failure in one never prevents the other.

    The provider client and zone ID are set up lazily on the first tick and
    reused afterwards. A failure setting either up stops the loop.
    """

    def __init__(
        self,
        config: DDNSConfig,
        resolver: Optional[AddressResolver] = None,
        provider_factory: ProviderFactory = create_provider,
        shutdown_event: Optional[threading.Event] = None,
    ):
        self.config = config
        self.resolver = resolver or AddressResolver(timeout=config.http_timeout)
        self.provider_factory = provider_factory
        self.shutdown_event = shutdown_event or threading.Event()
        self.session = UpdaterSession()
        self.logger = logging.getLogger(__name__)

        self._tick_count = 0

    def run(self) -> bool:
        """
        Run ticks until done.

        Returns:
            True if the loop ended normally (single run completed or shutdown
            requested), False if it stopped on a setup error
        """
        self.logger.info("=" * 50)
        self.logger.info("Cloudflare DDNS Updater Starting")
        self.logger.info("=" * 50)
        self.logger.info(f"Record:          {self.config.record_name}")
        self.logger.info(f"Zone:            {self.config.zone}")
        self.logger.info(f"Update A:        {self.config.update_a}")
        self.logger.info(f"Update AAAA:     {self.config.update_aaaa}")
        if self.config.update_once:
            self.logger.info("Mode:            single update")
        else:
            self.logger.info(f"Update interval: {self.config.update_interval} minutes")
        if self.config.dry_run:
            self.logger.info("Dry run:         no changes will be made")
        self.logger.info("")

        while True:
            try:
                self.tick()
            except FatalUpdateError as e:
                self.logger.error(str(e))
                return False

            if self.config.update_once:
                return True

            # Wait for next tick
            if self.shutdown_event.wait(self.config.update_interval_seconds):
                self.logger.info("Shutdown requested, stopping")
                return True

    def tick(self) -> TickResult:
        """
        Run one update pass for all enabled families.

        Raises:
            FatalUpdateError: provider client or zone ID could not be set up
        """
        self._tick_count += 1
        self.logger.debug(f"Starting update #{self._tick_count}")
        provider = self._ensure_provider()
        zone_id = self._ensure_zone_id(provider)
        reconciler = RecordReconciler(
            provider, ttl=self.config.ttl, dry_run=self.config.dry_run
        )

        result = TickResult()

        if self.config.update_a:
            result.a = self._update_family(
                reconciler, zone_id, IPFamily.V4, RecordType.A, self.config.ipv4_query_url
            )
        else:
            self.logger.debug("Not updating A records as DONT_UPDATE_A ENV is set")

        if self.config.update_aaaa:
            result.aaaa = self._update_family(
                reconciler, zone_id, IPFamily.V6, RecordType.AAAA, self.config.ipv6_query_url
            )
        else:
            self.logger.debug("Not updating AAAA records as DONT_UPDATE_AAAA ENV is set")

        self._log_summary(result)
        return result

    def _ensure_provider(self) -> DNSProvider:
        if self.session.provider is None:
            try:
                self.session.provider = self.provider_factory(self.config)
            except DNSProviderError as e:
                raise FatalUpdateError(f"Unable to create DNS provider client: {e}") from e
        return self.session.provider

    def _ensure_zone_id(self, provider: DNSProvider) -> str:
        if not self.session.zone_id:
            try:
                self.session.zone_id = provider.get_zone_id(self.config.zone)
            except DNSProviderError as e:
                raise FatalUpdateError(
                    f"Unable to resolve zone {self.config.zone}: {e}"
                ) from e
            self.logger.debug(f"Zone {self.config.zone} has ID {self.session.zone_id}")
        return self.session.zone_id

    def _update_family(
        self,
        reconciler: RecordReconciler,
        zone_id: str,
        family: IPFamily,
        record_type: RecordType,
        url: str,
    ) -> Optional[ReconcileOutcome]:
        try:
            address = self.resolver.resolve(url, family)
        except ResolutionError as e:
            self.logger.error(str(e))
            return None

        self.logger.debug(f"External {family} address is {address}")

        selector = DNSRecordSelector(name=self.config.record_name, type=record_type)
        outcome = reconciler.reconcile(zone_id, selector, address)
        self.logger.debug(f"{selector}: {outcome.value}")
        return outcome

    def _log_summary(self, result: TickResult) -> None:
        if result.a_succeeded and result.aaaa_succeeded:
            self.logger.info("Both A and AAAA records updated successfully")
        elif result.a_succeeded:
            self.logger.info("A record updated successfully")
        elif result.aaaa_succeeded:
            self.logger.info("AAAA record updated successfully")
        else:
            self.logger.error("Unable to update either A or AAAA record")
