"""Collectors for the siad node modules.

Each collector reads one module of the node API and writes its gauges.
"""
# Base classes
from .collector_base import ModuleCollector

# Re-export collectors so the core can discover them by import.
from .consensus import ConsensusCollector
from .wallet import WalletCollector
from .host import HostCollector
from .hostdb import HostDbCollector

# What this package exports
__all__ = [
    # Base classes
    "ModuleCollector",

    # Concrete collectors
    "ConsensusCollector",
    "WalletCollector",
    "HostCollector",
    "HostDbCollector",
]
