from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from ..currency import (
    blocks_to_weeks,
    bool_to_float,
    collateral_per_tb_month,
    to_siacoins,
    window_size_hours,
)
from ..types import PAYLOAD_ERRORS, BandwidthInfo, CollectorPartialError, HostInfo, StorageFolder
from .collector_base import ModuleCollector

logger = logging.getLogger(__name__)


def sum_folders(folders: Iterable[StorageFolder]) -> Tuple[int, int]:
    """Return (total capacity, remaining capacity) over all storage folders."""
    total = remaining = 0
    for folder in folders:
        total += folder.capacity
        remaining += folder.capacity_remaining
    return total, remaining


class HostCollector(ModuleCollector):
    """Host settings, collateral, revenue, storage folders and bandwidth."""

    NAME = "host"
    VERSION = "0.1.0"

    def refresh(self) -> None:
        # Settings first; a missing host module ends the refresh here.
        hg = HostInfo.from_dict(self.client.host_get())
        self._set_settings(hg)
        messages: List[str] = []

        try:
            sg = self.client.host_storage_get()
            folders = [StorageFolder.from_dict(f) for f in (sg.get("folders") or [])]
        except PAYLOAD_ERRORS as e:
            logger.info("Could not fetch storage info: %s", e)
            messages.append(f"host storage: {e}")
        else:
            total, remaining = sum_folders(folders)
            self.gauges.set("host_folder_total_storage", total)
            self.gauges.set("host_folder_remaining_storage", remaining)
            self.gauges.set("host_storage_folder_count", len(folders))

        try:
            band = BandwidthInfo.from_dict(self.client.host_bandwidth_get())
        except PAYLOAD_ERRORS as e:
            logger.info("Could not fetch bandwidth info: %s", e)
            messages.append(f"host bandwidth: {e}")
        else:
            self.gauges.set("host_upload", band.upload)
            self.gauges.set("host_download", band.download)

        if messages:
            raise CollectorPartialError(messages)

    def _set_settings(self, hg: HostInfo) -> None:
        self.gauges.set("host_accepting_contracts", bool_to_float(hg.accepting_contracts))
        self.gauges.set("host_total_storage", hg.total_storage)
        self.gauges.set("host_remaining_storage", hg.remaining_storage)
        self.gauges.set("host_max_duration", blocks_to_weeks(hg.max_duration))
        self.gauges.set("host_max_download_batch_size", hg.max_download_batch_size)
        self.gauges.set("host_max_revise_batch_size", hg.max_revise_batch_size)
        self.gauges.set("host_window_size", window_size_hours(hg.window_size))

        self.gauges.set("host_collateral", collateral_per_tb_month(hg.collateral))
        self.gauges.set("host_collateral_budget", to_siacoins(hg.collateral_budget))
        self.gauges.set("host_max_collateral", to_siacoins(hg.max_collateral))

        self.gauges.set("host_locked_collateral", to_siacoins(hg.locked_storage_collateral))
        self.gauges.set("host_ingress_potential", to_siacoins(hg.potential_download_bandwidth_revenue))
        self.gauges.set("host_egress_potential", to_siacoins(hg.potential_upload_bandwidth_revenue))
        self.gauges.set("host_storage_potential", to_siacoins(hg.potential_storage_revenue))
        self.gauges.set("host_contract_count", hg.contract_count)
