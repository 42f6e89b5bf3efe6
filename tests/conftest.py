from __future__ import annotations
from unittest.mock import Mock

import pytest

from siad_exporter.metrics import GaugeRegistry

SC = 10 ** 24

CONSENSUS = {
    "synced": True,
    "height": 500000,
    "currentblock": "00000000000000000e1c4a0b3b1b4f6a1f2a3d4c5b6a79880000000000000000",
    "target": [0, 0, 0, 0, 0, 0, 0, 0, 14, 28],
    "difficulty": "12345",
}

WALLET = {
    "encrypted": True,
    "unlocked": True,
    "rescanning": False,
    "confirmedsiacoinbalance": str(2 * SC),
    "unconfirmedoutgoingsiacoins": "0",
    "unconfirmedincomingsiacoins": str(SC // 2),
    "siafundbalance": "10",
    "siacoinclaimbalance": str(3 * SC),
    "dustthreshold": "1200000000000000000",
}

WALLET_ADDRESSES = {
    "addresses": [
        "1234567890abcdef0123456789abcdef0123456789abcdef0123456789abcdef01234567890a",
        "abcdef0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef012345",
        "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef0123456789ab",
    ]
}

HOST = {
    "externalsettings": {
        "acceptingcontracts": True,
        "maxdownloadbatchsize": 17825792,
        "maxduration": 25920,
        "netaddress": "host.example.com:9982",
        "remainingstorage": 4 * 10 ** 12,
        "sectorsize": 4194304,
        "totalstorage": 10 * 10 ** 12,
        "windowsize": 144,
    },
    "financialmetrics": {
        "contractcount": 42,
        "lockedstoragecollateral": str(5 * SC),
        "potentialdownloadbandwidthrevenue": str(7 * SC),
        "potentialuploadbandwidthrevenue": str(SC // 4),
        "potentialstoragerevenue": str(11 * SC),
    },
    "internalsettings": {
        "acceptingcontracts": True,
        "maxdownloadbatchsize": 17825792,
        "maxduration": 10080,
        "maxrevisebatchsize": 17825792,
        "netaddress": "host.example.com:9982",
        "windowsize": 144,
        # 1e11 H per byte per block is 432 SC per TB per month
        "collateral": "100000000000",
        "collateralbudget": str(1000 * SC),
        "maxcollateral": str(200 * SC),
    },
}

HOST_STORAGE = {
    "folders": [
        {"path": "/srv/sia/a", "capacity": 100, "capacityremaining": 10, "index": 0},
        {"path": "/srv/sia/b", "capacity": 200, "capacityremaining": 20, "index": 1},
        {"path": "/srv/sia/c", "capacity": 300, "capacityremaining": 30, "index": 2},
    ]
}

HOST_BANDWIDTH = {"upload": 1024, "download": 2048, "starttime": "2026-10-01T00:00:00Z"}


def scan(success: bool) -> dict:
    return {"timestamp": "2026-10-18T12:00:00Z", "success": success}


HOSTDB_ALL = {
    "hosts": [
        {"netaddress": "a:9982", "acceptingcontracts": True, "scanhistory": [scan(False), scan(True)]},
        {"netaddress": "b:9982", "acceptingcontracts": True, "scanhistory": [scan(True)]},
        {"netaddress": "c:9982", "acceptingcontracts": False, "scanhistory": [scan(True)]},
        {"netaddress": "d:9982", "acceptingcontracts": True, "scanhistory": [scan(True), scan(False)]},
        {"netaddress": "e:9982", "acceptingcontracts": True, "scanhistory": []},
        {"netaddress": "f:9982", "acceptingcontracts": False},
    ]
}


@pytest.fixture
def gauges() -> GaugeRegistry:
    return GaugeRegistry()


@pytest.fixture
def client() -> Mock:
    """Node client whose endpoints all answer successfully."""
    c = Mock()
    c.consensus_get.return_value = dict(CONSENSUS)
    c.wallet_get.return_value = dict(WALLET)
    c.wallet_addresses_get.return_value = dict(WALLET_ADDRESSES)
    c.host_get.return_value = dict(HOST)
    c.host_storage_get.return_value = dict(HOST_STORAGE)
    c.host_bandwidth_get.return_value = dict(HOST_BANDWIDTH)
    c.hostdb_all_get.return_value = dict(HOSTDB_ALL)
    return c
