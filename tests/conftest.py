"""Shared fixtures: in-memory provider and scripted address resolver."""

import ipaddress
from typing import Optional

import pytest

from cloudflare_ddns.config import DDNSConfig
from cloudflare_ddns.providers.base import (
    DNSProvider,
    DNSProviderError,
    DNSRecord,
    DNSRecordSelector,
)
from cloudflare_ddns.utils.ip import IPFamily, ResolutionError, ResolvedAddress


class FakeProvider(DNSProvider):
    """DNSProvider backed by a list, recording every call"""

    def __init__(self, records: Optional[list[DNSRecord]] = None, zone_id: str = "zone-1"):
        super().__init__()
        self.records = list(records or [])
        self.zone_id = zone_id
        self.calls: list[tuple] = []
        # Record type value -> exception raised by list/create/update for that type
        self.fail_on: dict[str, DNSProviderError] = {}
        self.zone_error: Optional[DNSProviderError] = None
        self._next_id = 100

    @property
    def writes(self) -> list[tuple]:
        return [c for c in self.calls if c[0] in ("create", "update")]

    def get_zone_id(self, zone_name: str) -> str:
        self.calls.append(("get_zone_id", zone_name))
        if self.zone_error:
            raise self.zone_error
        return self.zone_id

    def list_records(self, zone_id: str, selector: DNSRecordSelector) -> list[DNSRecord]:
        self.calls.append(("list", zone_id, selector))
        if selector.type.value in self.fail_on:
            raise self.fail_on[selector.type.value]
        return [r for r in self.records if r.selector == selector]

    def create_record(self, zone_id: str, record: DNSRecord) -> DNSRecord:
        self.calls.append(("create", zone_id, record))
        if record.type.value in self.fail_on:
            raise self.fail_on[record.type.value]
        self._next_id += 1
        record.record_id = str(self._next_id)
        self.records.append(record)
        return record

    def update_record(self, zone_id: str, record: DNSRecord) -> DNSRecord:
        self.calls.append(("update", zone_id, record))
        if record.type.value in self.fail_on:
            raise self.fail_on[record.type.value]
        for existing in self.records:
            if existing.record_id == record.record_id:
                existing.content = record.content
        return record


class FakeResolver:
    """Returns configured addresses per family, or raises ResolutionError"""

    def __init__(self, v4: Optional[str] = None, v6: Optional[str] = None):
        self.answers = {IPFamily.V4: v4, IPFamily.V6: v6}
        self.calls: list[tuple[str, IPFamily]] = []

    def resolve(self, url: str, family: IPFamily) -> ResolvedAddress:
        self.calls.append((url, family))
        answer = self.answers[family]
        if answer is None:
            raise ResolutionError(f"Unable to get {family} address from {url}")
        return ResolvedAddress(address=ipaddress.ip_address(answer), family=family)

    def close(self) -> None:
        pass


def address(text: str) -> ResolvedAddress:
    parsed = ipaddress.ip_address(text)
    family = IPFamily.V4 if parsed.version == 4 else IPFamily.V6
    return ResolvedAddress(address=parsed, family=family)


@pytest.fixture
def env() -> dict[str, str]:
    return {
        "CLOUDFLARE_API_KEY": "key",
        "CLOUDFLARE_EMAIL": "admin@example.com",
        "DNS_ZONE": "example.com",
        "SUBDOMAIN": "home",
    }


@pytest.fixture
def config(env: dict[str, str]) -> DDNSConfig:
    return DDNSConfig.from_env(env)
