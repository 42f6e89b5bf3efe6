from __future__ import annotations

from typing import Dict, Iterable, List

from ..types import HostDbEntry
from .collector_base import ModuleCollector


def classify_hosts(hosts: Iterable[HostDbEntry]) -> Dict[str, List[HostDbEntry]]:
    """Split hosts into active, inactive and offline.

    Every host lands in exactly one bucket. The active check runs first.
    """
    buckets: Dict[str, List[HostDbEntry]] = {"active": [], "inactive": [], "offline": []}
    for host in hosts:
        if host.accepting_contracts and host.last_scan_succeeded:
            buckets["active"].append(host)
        elif host.last_scan_succeeded:
            buckets["inactive"].append(host)
        else:
            buckets["offline"].append(host)
    return buckets


class HostDbCollector(ModuleCollector):
    NAME = "hostdb"
    VERSION = "0.1.0"

    def refresh(self) -> None:
        hosts = [HostDbEntry.from_dict(h) for h in (self.client.hostdb_all_get().get("hosts") or [])]
        buckets = classify_hosts(hosts)

        self.gauges.set("hostdb_host_count", len(hosts))
        self.gauges.set("hostdb_active_hosts", len(buckets["active"]))
        self.gauges.set("hostdb_inactive_hosts", len(buckets["inactive"]))
        self.gauges.set("hostdb_offline_hosts", len(buckets["offline"]))
