"""IP Detection Utilities.

Discovers the public IPv4/IPv6 address of this host by querying a plain-text
echo service over a transport pinned to one address family.
"""

from __future__ import annotations

import ipaddress
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

import requests
from requests.adapters import HTTPAdapter

logger = logging.getLogger(__name__)

DEFAULT_QUERY_URL = "http://icanhazip.com/"

# Initial request plus three retries
DEFAULT_MAX_ATTEMPTS = 4

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


class IPFamily(Enum):
    """Address family, with the wildcard used to pin outgoing sockets"""

    V4 = (4, "0.0.0.0", "IPv4")
    V6 = (6, "::", "IPv6")

    def __init__(self, version: int, wildcard: str, label: str):
        self.version = version
        self.wildcard = wildcard
        self.label = label

    def __str__(self) -> str:
        return self.label


class ResolutionError(Exception):
    """Public address could not be determined"""


@dataclass(frozen=True)
class ResolvedAddress:
    """Public IP address tagged with the family it was resolved over"""

    address: IPAddress
    family: IPFamily

    def __str__(self) -> str:
        return str(self.address)


class FamilyAdapter(HTTPAdapter):
    """
    Transport adapter that only dials over one address family.

    Every socket is bound to the family's wildcard address before connecting,
    so candidate addresses of the other family fail to bind and are skipped
    even when the host publishes both A and AAAA records.
    """

    def __init__(self, family: IPFamily, **kwargs: Any):
        # HTTPAdapter.__init__ calls init_poolmanager
        self.family = family
        super().__init__(**kwargs)

    def init_poolmanager(
        self, connections: int, maxsize: int, block: bool = False, **pool_kwargs: Any
    ) -> None:
        pool_kwargs["source_address"] = (self.family.wildcard, 0)
        super().init_poolmanager(connections, maxsize, block=block, **pool_kwargs)


def parse_address(text: str, family: IPFamily) -> Optional[IPAddress]:
    """Parse text as an address of the given family, None if it isn't one"""
    try:
        address = ipaddress.ip_address(text.strip())
    except ValueError:
        return None

    if address.version != family.version:
        return None
    return address


class AddressResolver:
    """
    Resolves the public address of this host for a given family.

    Malformed or wrong-family responses are retried immediately, up to
    max_attempts requests in total. Transport errors are not retried.
    """

    def __init__(self, timeout: int = 5, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.logger = logging.getLogger(__name__)
        self._sessions: dict[IPFamily, requests.Session] = {}

    def _create_session(self, family: IPFamily) -> requests.Session:
        """Create a requests session pinned to one address family"""
        session = requests.Session()
        # A proxy would dial on our behalf, defeating the family pinning
        session.trust_env = False
        adapter = FamilyAdapter(family)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.headers.update({"User-Agent": "cloudflare-ddns"})
        return session

    def _session_for(self, family: IPFamily) -> requests.Session:
        if family not in self._sessions:
            self._sessions[family] = self._create_session(family)
        return self._sessions[family]

    def resolve(self, url: str, family: IPFamily) -> ResolvedAddress:
        """
        Query url over the given family and return the echoed address.

        Raises:
            ResolutionError: on transport failure, or when every attempt
                returned something other than a valid address of the family
        """
        session = self._session_for(family)

        for attempt in range(1, self.max_attempts + 1):
            try:
                response = session.get(url, timeout=self.timeout)
            except requests.RequestException as e:
                raise ResolutionError(f"Failed to query {url} over {family}: {e}") from e

            body = response.text.strip()
            address = parse_address(body, family)
            if address is not None:
                self.logger.debug(f"Detected {family} address via {url}: {address}")
                return ResolvedAddress(address=address, family=family)

            self.logger.debug(
                f"Attempt {attempt}/{self.max_attempts}: {url} returned "
                f"{body[:64]!r}, not an {family} address"
            )

        raise ResolutionError(
            f"Unable to get {family} address from {url} "
            f"after {self.max_attempts} attempts"
        )

    def close(self) -> None:
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()
