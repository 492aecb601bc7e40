"""Configuration for the dynamic DNS updater."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .utils.ip import DEFAULT_QUERY_URL

TRUE_STRING = "true"

USAGE = """usage: cloudflare-ddns
The following ENV variables must be specified:
Name			Description
CLOUDFLARE_EMAIL	Cloudflare login email
CLOUDFLARE_API_KEY	Cloudflare API KEY
DNS_ZONE		DNS Zone to update
SUBDOMAIN		Subdomain to update
The following ENV variables are optional
Name			Default Value		Description
DONT_UPDATE_A		false			Set to true if the application should not update A value
DONT_UPDATE_AAAA	false			Set to true if the application should not update AAAA value
IPV4_QUERY_URL		http://icanhazip.com/	Url to query for ipv4
IPV6_QUERY_URL		http://icanhazip.com/	Url to query for ipv6
HTTP_TIMEOUT		5			HTTP Timeout value in seconds
UPDATE_INTERVAL		5			Update interval value in minutes
UPDATE_ONCE		false			Set to true if the program should only update once
DNS_TTL			1			TTL of created records in seconds (1 = automatic)
DRY_RUN			false			Set to true to log changes instead of applying them
DEBUG			false			Set to true to enable debug logging
"""


class ConfigError(ValueError):
    """Invalid or incomplete configuration"""


class MissingCredentialsError(ConfigError):
    """CLOUDFLARE_API_KEY is not set"""


def _flag(environ: Mapping[str, str], name: str) -> bool:
    # Only the exact string "true" enables a flag
    return environ.get(name, "") == TRUE_STRING


def _integer(
    environ: Mapping[str, str], name: str, default: int, minimum: Optional[int] = None
) -> int:
    value = environ.get(name, "")
    if value == "":
        return default
    try:
        number = int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None
    if minimum is not None and number < minimum:
        raise ConfigError(f"{name} must be at least {minimum}, got {number}")
    return number


def _required(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name, "")
    if not value:
        raise ConfigError(f"{name} must be defined in ENV")
    return value


@dataclass(frozen=True)
class DDNSConfig:
    """Dynamic DNS updater configuration"""

    api_key: str
    email: str
    zone: str
    subdomain: str

    update_a: bool = True
    update_aaaa: bool = True

    ipv4_query_url: str = DEFAULT_QUERY_URL
    ipv6_query_url: str = DEFAULT_QUERY_URL

    http_timeout: int = 5  # seconds
    update_interval: int = 5  # minutes
    update_once: bool = False

    ttl: int = 1  # 1 = automatic
    dry_run: bool = False
    debug: bool = False

    @property
    def record_name(self) -> str:
        """Fully qualified name of the managed records"""
        return f"{self.subdomain}.{self.zone}"

    @property
    def update_interval_seconds(self) -> int:
        return self.update_interval * 60

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DDNSConfig":
        """
        Create config from environment variables.

        Raises:
            MissingCredentialsError: CLOUDFLARE_API_KEY is unset or empty
            ConfigError: another required variable is missing, a numeric
                variable does not parse, or HTTP_TIMEOUT / UPDATE_INTERVAL
                is not positive
        """
        if environ is None:
            environ = os.environ

        if not environ.get("CLOUDFLARE_API_KEY"):
            raise MissingCredentialsError(
                "CLOUDFLARE_API_KEY ENV Variable must be declared"
            )

        return cls(
            api_key=environ["CLOUDFLARE_API_KEY"],
            email=_required(environ, "CLOUDFLARE_EMAIL"),
            zone=_required(environ, "DNS_ZONE"),
            subdomain=_required(environ, "SUBDOMAIN"),
            update_a=not _flag(environ, "DONT_UPDATE_A"),
            update_aaaa=not _flag(environ, "DONT_UPDATE_AAAA"),
            ipv4_query_url=environ.get("IPV4_QUERY_URL") or DEFAULT_QUERY_URL,
            ipv6_query_url=environ.get("IPV6_QUERY_URL") or DEFAULT_QUERY_URL,
            http_timeout=_integer(environ, "HTTP_TIMEOUT", 5, minimum=1),
            update_interval=_integer(environ, "UPDATE_INTERVAL", 5, minimum=1),
            update_once=_flag(environ, "UPDATE_ONCE"),
            ttl=_integer(environ, "DNS_TTL", 1),
            dry_run=_flag(environ, "DRY_RUN"),
            debug=_flag(environ, "DEBUG"),
        )
