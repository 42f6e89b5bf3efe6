"""Shared type and exception definitions for the exporter."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .currency import parse_amount


class ExporterError(Exception):
    """Base exception for exporter errors."""
    pass


class ModuleNotLoadedError(ExporterError):
    """Raised when the node does not recognize a module's API call."""
    pass


class FetchError(ExporterError):
    """Raised when a node API call fails for any other reason."""
    pass


class CollectorPartialError(ExporterError):
    """Raised when a collector wrote its primary gauges but a secondary fetch failed."""
    def __init__(self, messages: List[str]):
        self.messages = messages
        super().__init__("; ".join(messages))


@dataclass
class ModuleResult:
    """Outcome of one module refresh."""
    collector_name: str
    collector_version: str
    collection_time: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    status: str = "success"
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a dictionary."""
        return {
            "collector_name": self.collector_name,
            "collector_version": self.collector_version,
            "collection_time": self.collection_time,
            "status": self.status,
            "errors": list(self.errors),
        }


@dataclass
class ConsensusInfo:
    synced: bool
    height: int
    difficulty: Decimal

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConsensusInfo":
        return cls(
            synced=bool(data["synced"]),
            height=int(data["height"]),
            difficulty=parse_amount(data.get("difficulty", 0)),
        )


@dataclass
class WalletInfo:
    unlocked: bool
    confirmed_siacoin_balance: Decimal
    unconfirmed_incoming_siacoins: Optional[Decimal] = None
    unconfirmed_outgoing_siacoins: Optional[Decimal] = None
    siafund_balance: Optional[Decimal] = None
    siacoin_claim_balance: Optional[Decimal] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WalletInfo":
        def optional(key: str) -> Optional[Decimal]:
            value = data.get(key)
            return None if value is None else parse_amount(value)

        return cls(
            unlocked=bool(data["unlocked"]),
            confirmed_siacoin_balance=parse_amount(data["confirmedsiacoinbalance"]),
            unconfirmed_incoming_siacoins=optional("unconfirmedincomingsiacoins"),
            unconfirmed_outgoing_siacoins=optional("unconfirmedoutgoingsiacoins"),
            siafund_balance=optional("siafundbalance"),
            siacoin_claim_balance=optional("siacoinclaimbalance"),
        )


@dataclass
class HostInfo:
    """Subset of the /host response used for gauges.

    Only the fields that end up in a gauge are kept; the node returns many
    more (network metrics, connectability status, price table).
    """
    accepting_contracts: bool
    total_storage: int
    remaining_storage: int
    max_duration: int
    max_download_batch_size: int
    max_revise_batch_size: int
    window_size: int
    collateral: Decimal
    collateral_budget: Decimal
    max_collateral: Decimal
    contract_count: int
    locked_storage_collateral: Decimal
    potential_download_bandwidth_revenue: Decimal
    potential_upload_bandwidth_revenue: Decimal
    potential_storage_revenue: Decimal

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HostInfo":
        es = data.get("externalsettings") or {}
        fm = data.get("financialmetrics") or {}
        is_ = data.get("internalsettings") or {}
        return cls(
            accepting_contracts=bool(is_.get("acceptingcontracts", False)),
            total_storage=int(es.get("totalstorage", 0)),
            remaining_storage=int(es.get("remainingstorage", 0)),
            max_duration=int(is_.get("maxduration", 0)),
            max_download_batch_size=int(is_.get("maxdownloadbatchsize", 0)),
            max_revise_batch_size=int(is_.get("maxrevisebatchsize", 0)),
            window_size=int(is_.get("windowsize", 0)),
            collateral=parse_amount(is_.get("collateral", 0)),
            collateral_budget=parse_amount(is_.get("collateralbudget", 0)),
            max_collateral=parse_amount(is_.get("maxcollateral", 0)),
            contract_count=int(fm.get("contractcount", 0)),
            locked_storage_collateral=parse_amount(fm.get("lockedstoragecollateral", 0)),
            potential_download_bandwidth_revenue=parse_amount(fm.get("potentialdownloadbandwidthrevenue", 0)),
            potential_upload_bandwidth_revenue=parse_amount(fm.get("potentialuploadbandwidthrevenue", 0)),
            potential_storage_revenue=parse_amount(fm.get("potentialstoragerevenue", 0)),
        )


@dataclass
class StorageFolder:
    path: str
    capacity: int
    capacity_remaining: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StorageFolder":
        return cls(
            path=str(data.get("path", "")),
            capacity=int(data.get("capacity", 0)),
            capacity_remaining=int(data.get("capacityremaining", 0)),
        )


@dataclass
class BandwidthInfo:
    upload: int
    download: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BandwidthInfo":
        return cls(upload=int(data.get("upload", 0)), download=int(data.get("download", 0)))


@dataclass
class HostScan:
    timestamp: str
    success: bool


@dataclass
class HostDbEntry:
    net_address: str
    accepting_contracts: bool
    scan_history: List[HostScan] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HostDbEntry":
        history = [
            HostScan(timestamp=str(scan.get("timestamp", "")), success=bool(scan.get("success", False)))
            for scan in (data.get("scanhistory") or [])
        ]
        return cls(
            net_address=str(data.get("netaddress", "")),
            accepting_contracts=bool(data.get("acceptingcontracts", False)),
            scan_history=history,
        )

    @property
    def last_scan_succeeded(self) -> bool:
        return bool(self.scan_history) and self.scan_history[-1].success


# Failures of a secondary fetch: the call itself, or a payload that does not parse.
PAYLOAD_ERRORS = (ExporterError, TypeError, ValueError, AttributeError, ArithmeticError)
