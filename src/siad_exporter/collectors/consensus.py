from __future__ import annotations

from ..currency import bool_to_float
from ..types import ConsensusInfo
from .collector_base import ModuleCollector


class ConsensusCollector(ModuleCollector):
    NAME = "consensus"
    VERSION = "0.1.0"
    LOADED_GAUGE = "consensus_module_loaded"

    def refresh(self) -> None:
        cg = ConsensusInfo.from_dict(self.client.consensus_get())

        self.gauges.set("consensus_module_loaded", 1)
        self.gauges.set("consensus_synced", bool_to_float(cg.synced))
        self.gauges.set("consensus_height", float(cg.height))
        self.gauges.set("consensus_difficulty", float(cg.difficulty))
