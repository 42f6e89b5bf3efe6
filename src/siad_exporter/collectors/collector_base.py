"""Base classes for module collectors."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from ..metrics import GaugeRegistry
from ..types import CollectorPartialError, FetchError, ModuleNotLoadedError, ModuleResult

logger = logging.getLogger(__name__)


class ModuleCollector(ABC):
    """Base class for all module collectors.

    A collector reads one node module through the API client and writes the
    derived values into the gauge registry. ``refresh`` does the work and is
    allowed to raise; ``run`` applies the error policy and never raises.
    """

    # These should be overridden by subclasses
    NAME: str
    VERSION: str = "0.0.0"
    # Gauge set to 0 when the module is not loaded; None if the module has none.
    LOADED_GAUGE: Optional[str] = None

    def __init__(self, client, gauges: GaugeRegistry):
        if not getattr(self, "NAME", None):
            raise NotImplementedError("Subclasses must define NAME")
        self.client = client
        self.gauges = gauges

    @classmethod
    def create(cls, client, gauges: GaugeRegistry) -> "ModuleCollector":
        """Factory method used by the core when instantiating discovered collectors."""
        return cls(client, gauges)

    @abstractmethod
    def refresh(self) -> None:
        """Fetch the module's endpoints and set its gauges."""

    def run(self, debug: bool = False) -> ModuleResult:
        """Run ``refresh`` and report how it went.

        Args:
            debug: If True, log tracebacks for unexpected failures at DEBUG.

        Returns:
            ModuleResult with status success, partial, unavailable or failed.
        """
        result = ModuleResult(collector_name=self.NAME, collector_version=self.VERSION)
        start = datetime.now(timezone.utc)
        try:
            self.refresh()
        except ModuleNotLoadedError as e:
            logger.info("%s module is not loaded", self.NAME.capitalize())
            if self.LOADED_GAUGE:
                self.gauges.set(self.LOADED_GAUGE, 0)
            result.status = "unavailable"
            result.errors.append(str(e))
        except FetchError as e:
            logger.warning("Could not fetch %s metrics: %s", self.NAME, e)
            result.status = "failed"
            result.errors.append(str(e))
        except CollectorPartialError as e:
            result.status = "partial"
            result.errors.extend(e.messages)
        except Exception as e:
            logger.error("Error in collector %s: %s", self.NAME, e, exc_info=debug)
            result.status = "failed"
            result.errors.append(f"{type(e).__name__}: {e}")

        logger.debug("Collector %s finished with status %s in %.3fs", self.NAME, result.status,
                     (datetime.now(timezone.utc) - start).total_seconds())
        return result
