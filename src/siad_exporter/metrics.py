"""
metrics.py
- Defines every gauge the exporter publishes.
- GaugeRegistry owns a prometheus_client CollectorRegistry and is handed to
  each module collector; nothing here is a module-level global.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from prometheus_client import CollectorRegistry, Gauge, generate_latest

# (name, help) for every gauge, grouped by node module.
CONSENSUS_METRICS: List[Tuple[str, str]] = [
    ("consensus_module_loaded", "Is the consensus module loaded. 0=not loaded.  1=loaded"),
    ("consensus_synced", "Is the node synced. 0=not synced.  1=synced"),
    ("consensus_height", "Current block height"),
    ("consensus_difficulty", "Current consensus difficulty"),
]

WALLET_METRICS: List[Tuple[str, str]] = [
    ("wallet_module_loaded", "Is the wallet module loaded. 0=not loaded.  1=loaded"),
    ("wallet_locked", "Is the wallet locked. 0=not locked.  1=locked"),
    ("wallet_confirmed_siacoin_balance", "Wallet confirmed Siacoin balance (Siacoins)"),
    ("wallet_confirmed_siacoin_balance_hastings", "Wallet confirmed Siacoin balance (Hastings)"),
    ("wallet_unconfirmed_incoming_siacoins", "Unconfirmed incoming Siacoins"),
    ("wallet_unconfirmed_outgoing_siacoins", "Unconfirmed outgoing Siacoins"),
    ("wallet_siafund_balance", "Wallet Siafund balance"),
    ("wallet_siacoin_claim_balance", "Wallet Siacoin claim balance (Siacoins)"),
    ("wallet_address_count", "Number of addresses tracked by the wallet"),
]

HOST_METRICS: List[Tuple[str, str]] = [
    ("host_accepting_contracts", "Is the host accepting contracts 0=no, 1=yes"),
    ("host_total_storage", "total amount of storage available on the host in bytes"),
    ("host_remaining_storage", "amount of storage remaining on the host in bytes"),
    ("host_folder_total_storage", "sum of storage folder capacities in bytes"),
    ("host_folder_remaining_storage", "sum of remaining storage folder capacities in bytes"),
    ("host_storage_folder_count", "number of storage folders"),
    ("host_max_duration", "max duration in weeks"),
    ("host_max_download_batch_size", "Max Download Batch Size"),
    ("host_max_revise_batch_size", "Max revise Batch Size"),
    ("host_window_size", "Window Size in hours"),
    ("host_collateral", "Host Collateral in Siacoins per TB per month"),
    ("host_collateral_budget", "Host Collateral budget in Siacoins"),
    ("host_max_collateral", "Max collateral per contract"),
    ("host_locked_collateral", "Locked collateral"),
    ("host_ingress_potential", "Ingress potential revenue"),
    ("host_egress_potential", "Egress potential revenue"),
    ("host_storage_potential", "Storage potential revenue"),
    ("host_contract_count", "number of host contracts"),
    ("host_upload", "Node Data Uploaded in bytes"),
    ("host_download", "Node Data Downloaded in bytes"),
]

HOSTDB_METRICS: List[Tuple[str, str]] = [
    ("hostdb_host_count", "Number of hosts known to the host database"),
    ("hostdb_active_hosts", "Hosts accepting contracts whose last scan succeeded"),
    ("hostdb_inactive_hosts", "Hosts not accepting contracts whose last scan succeeded"),
    ("hostdb_offline_hosts", "Hosts with no scan history or a failed last scan"),
]

ALL_METRICS: List[Tuple[str, str]] = CONSENSUS_METRICS + WALLET_METRICS + HOST_METRICS + HOSTDB_METRICS

MODULE_METRICS: Dict[str, List[Tuple[str, str]]] = {
    "consensus": CONSENSUS_METRICS,
    "wallet": WALLET_METRICS,
    "host": HOST_METRICS,
    "hostdb": HOSTDB_METRICS,
}


class GaugeRegistry:
    """Named gauges backed by a dedicated prometheus_client registry."""

    def __init__(self, definitions: Iterable[Tuple[str, str]] = ALL_METRICS,
                 registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self._gauges: Dict[str, Gauge] = {}
        for name, help_text in definitions:
            self._gauges[name] = Gauge(name, help_text, registry=self.registry)

    def set(self, name: str, value: float) -> None:
        try:
            gauge = self._gauges[name]
        except KeyError:
            raise KeyError(f"Unknown gauge: {name}") from None
        gauge.set(float(value))

    def value(self, name: str) -> Optional[float]:
        if name not in self._gauges:
            raise KeyError(f"Unknown gauge: {name}")
        return self.registry.get_sample_value(name)

    def names(self) -> List[str]:
        return list(self._gauges)

    def as_dict(self, names: Optional[Iterable[str]] = None) -> Dict[str, float]:
        if names is None:
            names = self._gauges
        return {name: self.value(name) for name in names}

    def exposition(self) -> bytes:
        """Prometheus text exposition of every gauge."""
        return generate_latest(self.registry)
