# DNS Provider Module
# Provides abstract DNS provider interface and the Cloudflare implementation

from .base import (
    DNSProvider,
    DNSProviderError,
    DNSRecord,
    DNSRecordSelector,
    RecordType,
)
from .cloudflare import (
    CloudflareAPIError,
    CloudflareConfig,
    CloudflareProvider,
    ZoneNotFoundError,
)

__all__ = [
    "CloudflareAPIError",
    "CloudflareConfig",
    "CloudflareProvider",
    "DNSProvider",
    "DNSProviderError",
    "DNSRecord",
    "DNSRecordSelector",
    "RecordType",
    "ZoneNotFoundError",
]
