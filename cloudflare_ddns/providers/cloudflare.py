"""
Cloudflare DNS Provider Implementation

Uses Cloudflare API v4 for DNS record management, authenticated with the
account email and global API key.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from .base import (
    DNSProvider,
    DNSProviderError,
    DNSRecord,
    DNSRecordSelector,
    RecordType,
)

logger = logging.getLogger(__name__)

CLOUDFLARE_API_BASE = "https://api.cloudflare.com/client/v4"


class CloudflareAPIError(DNSProviderError):
    """Cloudflare API error"""


class ZoneNotFoundError(CloudflareAPIError):
    """No zone matches the requested name"""


@dataclass(frozen=True)
class CloudflareConfig:
    """Cloudflare-specific configuration"""

    api_key: str
    email: str

    # API base URL
    api_base: str = CLOUDFLARE_API_BASE

    # Request timeout in seconds
    timeout: int = 30

    # Records per page when listing
    per_page: int = 100


class CloudflareProvider(DNSProvider):
    """
    Cloudflare DNS provider implementation.

    Features:
    - Zone lookup by name
    - Paginated record listing filtered by name and type
    - Content-only updates (PATCH), so TTL and proxy status set in the
      dashboard survive an address change
    """

    def __init__(self, config: CloudflareConfig):
        if not config.api_key or not config.email:
            raise CloudflareAPIError("Invalid credentials: API key and email are required")
        super().__init__()
        self.cf_config = config
        self._session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create configured requests session"""
        session = requests.Session()
        session.headers.update(
            {
                "X-Auth-Email": self.cf_config.email,
                "X-Auth-Key": self.cf_config.api_key,
                "Content-Type": "application/json",
            }
        )
        return session

    def _api_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict[str, Any]] = None,
        json_data: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Make API request to Cloudflare"""
        url = f"{self.cf_config.api_base}{endpoint}"

        try:
            response = self._session.request(
                method=method,
                url=url,
                params=params,
                json=json_data,
                timeout=self.cf_config.timeout,
            )
        except requests.RequestException as e:
            raise CloudflareAPIError(f"Request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise CloudflareAPIError(
                f"Invalid response from Cloudflare (HTTP {response.status_code})"
            ) from e

        if not isinstance(data, dict):
            raise CloudflareAPIError(
                f"Unexpected response from Cloudflare (HTTP {response.status_code})"
            )

        if not data.get("success", False):
            errors = data.get("errors") or []
            if not isinstance(errors, list):
                errors = [errors]
            errors = [e if isinstance(e, dict) else {"message": str(e)} for e in errors]
            error_msg = "; ".join(str(e.get("message", e)) for e in errors)
            raise CloudflareAPIError(
                error_msg or f"HTTP {response.status_code}", errors
            )

        return data

    def get_zone_id(self, zone_name: str) -> str:
        """Get zone ID for an exact zone name"""
        data = self._api_request("GET", "/zones", params={"name": zone_name})

        results = data.get("result") or []
        if not results:
            raise ZoneNotFoundError(f"Zone could not be found: {zone_name}")

        try:
            zone_id = results[0]["id"]
        except (KeyError, TypeError) as e:
            raise CloudflareAPIError(f"Malformed zone in Cloudflare response: {e!r}") from e
        self.logger.debug(f"Found zone {zone_name} ({zone_id})")
        return zone_id

    def list_records(self, zone_id: str, selector: DNSRecordSelector) -> list[DNSRecord]:
        """List DNS records in a zone matching name and type"""
        params: dict[str, Any] = {
            "type": selector.type.value,
            "name": selector.name,
            "per_page": self.cf_config.per_page,
        }

        records = []
        page = 1

        while True:
            params["page"] = page

            data = self._api_request(
                "GET", f"/zones/{zone_id}/dns_records", params=params
            )

            for item in data.get("result") or []:
                records.append(self._to_record(item))

            # Check pagination
            result_info = data.get("result_info")
            if not isinstance(result_info, dict):
                break
            total_pages = result_info.get("total_pages", 1)
            if not isinstance(total_pages, int) or page >= total_pages:
                break
            page += 1

        return records

    def create_record(self, zone_id: str, record: DNSRecord) -> DNSRecord:
        """Create a new DNS record"""
        data = {
            "type": record.type.value,
            "name": record.name,
            "content": record.content,
            "ttl": record.ttl if record.ttl > 1 else 1,  # 1 = auto
            "proxied": record.proxied,
        }

        result = self._api_request(
            "POST", f"/zones/{zone_id}/dns_records", json_data=data
        )
        return self._to_record(result.get("result"))

    def update_record(self, zone_id: str, record: DNSRecord) -> DNSRecord:
        """Update the content of an existing DNS record"""
        if not record.record_id:
            raise CloudflareAPIError(
                f"Cannot update record without record_id: {record.name}"
            )

        data = {
            "type": record.type.value,
            "name": record.name,
            "content": record.content,
        }

        result = self._api_request(
            "PATCH",
            f"/zones/{zone_id}/dns_records/{record.record_id}",
            json_data=data,
        )
        return self._to_record(result.get("result"))

    @staticmethod
    def _to_record(item: Any) -> DNSRecord:
        """Convert an API record object, raising CloudflareAPIError if malformed"""
        try:
            return DNSRecord(
                name=item["name"],
                type=RecordType(item["type"]),
                content=item["content"],
                ttl=item.get("ttl", 1),
                proxied=item.get("proxied", False),
                record_id=item["id"],
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise CloudflareAPIError(f"Malformed record in Cloudflare response: {e!r}") from e
