from __future__ import annotations
import importlib
import inspect
import json
import logging
import pkgutil
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Type

import jsonschema

from . import __version__
from .metrics import MODULE_METRICS, GaugeRegistry
from .types import ExporterError, ModuleResult

log = logging.getLogger(__name__)

DEFAULT_MODULES = ("consensus", "wallet", "host", "hostdb")


def now_iso_tz() -> str:
    return datetime.now(timezone.utc).astimezone().isoformat(timespec="seconds")


def validate_output(instance: Dict, schema_path: str) -> None:
    with open(schema_path, "r", encoding="utf-8") as f:
        schema = json.load(f)
    jsonschema.validate(instance=instance, schema=schema)


def bundled_schema_path() -> str:
    import importlib.resources as ir
    with ir.as_file(ir.files(__package__) / "data" / "exporter_snapshot.schema.json") as p:
        return str(p)


def load_collectors() -> Dict[str, Type]:
    """Map collector NAME to class for every collector in the collectors package."""
    from . import collectors
    from .collectors.collector_base import ModuleCollector

    mapping = {}
    for _, module_name, _ in pkgutil.iter_modules(collectors.__path__):
        mod = importlib.import_module(f"{collectors.__name__}.{module_name}")
        names = getattr(mod, "__all__", None) or dir(mod)
        for attr in names:
            obj = getattr(mod, attr)
            if (isinstance(obj, type) and
                    issubclass(obj, ModuleCollector) and
                    not inspect.isabstract(obj)):
                mapping[obj.NAME] = obj
    return mapping


class Collector:
    """Runs the module collectors against one node and one gauge registry.

    Refreshes are serialized, so the daemon's worker thread and a scrape
    triggered refresh never interleave.
    """

    def __init__(self, client, gauges: Optional[GaugeRegistry] = None,
                 modules: Optional[Sequence[str]] = None):
        self.client = client
        self.gauges = gauges or GaugeRegistry()
        self.module_names: List[str] = list(modules or DEFAULT_MODULES)

        available = load_collectors()
        unknown = [name for name in self.module_names if name not in available]
        if unknown:
            raise ExporterError(f"Unknown collector(s): {', '.join(unknown)}")
        self.collectors = [available[name].create(client, self.gauges) for name in self.module_names]
        self._lock = threading.Lock()

    def refresh(self, debug: bool = False) -> Dict[str, ModuleResult]:
        """Run one refresh cycle over every configured module."""
        with self._lock:
            results: Dict[str, ModuleResult] = {}
            for collector in self.collectors:
                log.debug("Refreshing %s", collector.NAME)
                results[collector.NAME] = collector.run(debug=debug)
            return results

    def snapshot(self, results: Dict[str, ModuleResult]) -> Dict:
        """Build the JSON snapshot document from a cycle's results and the current gauges."""
        return {
            "exporter": {
                "exporter_version": __version__,
                "collection_time": now_iso_tz(),
                "modules_used": list(self.module_names),
            },
            "modules": {
                name: {"meta": result.to_dict()} for name, result in results.items()
            },
            # Only gauges of the modules this collector runs.
            "metrics": self.gauges.as_dict(
                name for module in self.module_names for name, _ in MODULE_METRICS[module]
            ),
        }


def collect_all(collector: Collector, schema_path: Optional[str] = None, validate: bool = True,
                debug: bool = False) -> Dict:
    """Run one refresh cycle and return the snapshot document.

    Args:
        collector: Collector wired to a node client and gauge registry
        schema_path: JSON schema for validation (defaults to the bundled schema)
        validate: Validate the document before returning it

    Returns:
        Dict in the format:
        {
            "exporter": { ... },
            "modules": {"consensus": {"meta": { ... }}, ...},
            "metrics": {"consensus_height": 500000.0, ...}
        }
    """
    results = collector.refresh(debug=debug)
    document = collector.snapshot(results)

    if validate:
        validate_output(document, schema_path or bundled_schema_path())

    return document
