"""
Abstract DNS Provider Interface

Provides the base class the reconciler talks to. Implementations wrap a
managed DNS service's REST API.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)


class DNSProviderError(Exception):
    """Provider operation failed"""

    def __init__(self, message: str, errors: Optional[list[dict[str, Any]]] = None):
        super().__init__(message)
        # Individual errors reported by the remote API, if any
        self.errors = errors or []


class RecordType(str, Enum):
    """Supported DNS record types"""

    A = "A"
    AAAA = "AAAA"


@dataclass(frozen=True)
class DNSRecordSelector:
    """Hostname and record type used to look up existing records"""

    name: str
    type: RecordType

    def __str__(self) -> str:
        return f"{self.type.value} {self.name}"


@dataclass
class DNSRecord:
    """Represents a DNS record"""

    name: str
    type: RecordType
    content: str
    ttl: int = 1  # 1 = automatic
    proxied: bool = False

    # Provider-assigned identifier, None until the record exists remotely
    record_id: Optional[str] = None

    def __post_init__(self) -> None:
        # Normalize record name (remove trailing dot)
        self.name = self.name.rstrip(".")

    @property
    def selector(self) -> DNSRecordSelector:
        return DNSRecordSelector(name=self.name, type=self.type)


class DNSProvider(ABC):
    """
    Abstract base class for DNS providers.

    Methods raise DNSProviderError (or a subclass) on transport failures or
    when the remote API reports an unsuccessful operation.
    """

    def __init__(self) -> None:
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    def get_zone_id(self, zone_name: str) -> str:
        """
        Get zone ID for a zone name.

        Args:
            zone_name: Zone name, e.g. "example.com"

        Returns:
            Provider-assigned zone identifier
        """

    @abstractmethod
    def list_records(self, zone_id: str, selector: DNSRecordSelector) -> list[DNSRecord]:
        """
        List DNS records in a zone matching a selector.

        Args:
            zone_id: Zone identifier
            selector: Name and type to match

        Returns:
            List of DNSRecord objects, possibly empty
        """

    @abstractmethod
    def create_record(self, zone_id: str, record: DNSRecord) -> DNSRecord:
        """
        Create a new DNS record.

        Args:
            zone_id: Zone identifier
            record: Record to create

        Returns:
            The created record with record_id set
        """

    @abstractmethod
    def update_record(self, zone_id: str, record: DNSRecord) -> DNSRecord:
        """
        Update the content of an existing DNS record.

        Args:
            zone_id: Zone identifier
            record: Record with record_id set

        Returns:
            The updated record
        """
