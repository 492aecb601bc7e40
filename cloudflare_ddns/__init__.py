"""Dynamic DNS updater for Cloudflare.

Public API:
    - DDNSUpdater: Main update loop
    - DDNSConfig: Configuration dataclass
    - RecordReconciler: Create-or-update logic for a single record
    - AddressResolver: Public address discovery
"""

from .config import ConfigError, DDNSConfig
from .reconciler import ReconcileOutcome, RecordReconciler
from .updater import DDNSUpdater, TickResult
from .utils.ip import AddressResolver, IPFamily, ResolutionError

__version__ = "1.0.0"

__all__ = [
    "AddressResolver",
    "ConfigError",
    "DDNSConfig",
    "DDNSUpdater",
    "IPFamily",
    "ReconcileOutcome",
    "RecordReconciler",
    "ResolutionError",
    "TickResult",
]
