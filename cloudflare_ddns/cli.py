"""
Cloudflare DDNS - keeps A/AAAA records pointed at this host's public address.

All configuration is read from environment variables; run with no
CLOUDFLARE_API_KEY set to print the list.

Exit status:
    0  single update completed, or the loop was asked to stop
    1  configuration error, or the provider/zone could not be set up
"""

import logging
import os
import sys
from typing import Mapping, Optional

from .config import USAGE, ConfigError, DDNSConfig, MissingCredentialsError
from .updater import DDNSUpdater


def setup_logging(verbose: bool = False) -> None:
    """Configure logging"""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main(environ: Optional[Mapping[str, str]] = None) -> int:
    if environ is None:
        environ = os.environ

    setup_logging(environ.get("DEBUG", "") == "true")
    logger = logging.getLogger(__name__)
    logger.debug("Debug mode enabled")

    try:
        config = DDNSConfig.from_env(environ)
    except MissingCredentialsError as e:
        logger.error(str(e))
        print(USAGE)
        return 1
    except ConfigError as e:
        logger.critical(str(e))
        return 1

    if environ.get("HTTP_TIMEOUT"):
        logger.info(f"Setting custom HTTP Timeout to {config.http_timeout} seconds")
    if environ.get("UPDATE_INTERVAL"):
        logger.info(f"Setting custom Update interval to {config.update_interval} minutes")
    if environ.get("IPV4_QUERY_URL"):
        logger.info(f"Setting ipv4 update url to {config.ipv4_query_url}")
    if environ.get("IPV6_QUERY_URL"):
        logger.info(f"Setting ipv6 update url to {config.ipv6_query_url}")

    updater = DDNSUpdater(config)
    try:
        success = updater.run()
    finally:
        updater.resolver.close()

    return 0 if success else 1


def run() -> None:
    """Console script entry point"""
    sys.exit(main())


if __name__ == "__main__":
    run()
