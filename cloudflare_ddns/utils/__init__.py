# Utility modules
from .ip import AddressResolver, IPFamily, ResolutionError, ResolvedAddress

__all__ = ["AddressResolver", "IPFamily", "ResolutionError", "ResolvedAddress"]
