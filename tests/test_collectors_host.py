from __future__ import annotations

from siad_exporter.collectors.host import HostCollector, sum_folders
from siad_exporter.types import FetchError, ModuleNotLoadedError, StorageFolder


def test_sum_folders():
    folders = [
        StorageFolder(path="a", capacity=100, capacity_remaining=10),
        StorageFolder(path="b", capacity=200, capacity_remaining=20),
        StorageFolder(path="c", capacity=300, capacity_remaining=30),
    ]
    assert sum_folders(folders) == (600, 60)
    assert sum_folders([]) == (0, 0)


def test_host_success(client, gauges):
    result = HostCollector(client, gauges).run()

    assert result.status == "success"
    assert gauges.value("host_accepting_contracts") == 1
    assert gauges.value("host_total_storage") == 10 * 10 ** 12
    assert gauges.value("host_remaining_storage") == 4 * 10 ** 12
    assert gauges.value("host_folder_total_storage") == 600
    assert gauges.value("host_folder_remaining_storage") == 60
    assert gauges.value("host_storage_folder_count") == 3
    assert gauges.value("host_max_duration") == 10.0
    assert gauges.value("host_max_download_batch_size") == 17825792
    assert gauges.value("host_max_revise_batch_size") == 17825792
    assert gauges.value("host_window_size") == 24
    assert gauges.value("host_collateral") == 432.0
    assert gauges.value("host_collateral_budget") == 1000.0
    assert gauges.value("host_max_collateral") == 200.0
    assert gauges.value("host_locked_collateral") == 5.0
    assert gauges.value("host_ingress_potential") == 7.0
    assert gauges.value("host_egress_potential") == 0.25
    assert gauges.value("host_storage_potential") == 11.0
    assert gauges.value("host_contract_count") == 42
    assert gauges.value("host_upload") == 1024
    assert gauges.value("host_download") == 2048


def test_host_not_loaded_touches_nothing(client, gauges):
    client.host_get.side_effect = ModuleNotLoadedError("API call not recognized: /host")
    before = gauges.as_dict()

    result = HostCollector(client, gauges).run()

    assert result.status == "unavailable"
    assert gauges.as_dict() == before
    client.host_storage_get.assert_not_called()


def test_host_settings_error_touches_nothing(client, gauges):
    client.host_get.side_effect = FetchError("HTTP 500")
    before = gauges.as_dict()

    result = HostCollector(client, gauges).run()

    assert result.status == "failed"
    assert gauges.as_dict() == before


def test_host_storage_error_still_sets_settings(client, gauges):
    gauges.set("host_folder_total_storage", 1)
    gauges.set("host_folder_remaining_storage", 2)
    client.host_storage_get.side_effect = FetchError("Connection error")

    result = HostCollector(client, gauges).run()

    assert result.status == "partial"
    assert result.errors == ["host storage: Connection error"]
    assert gauges.value("host_folder_total_storage") == 1
    assert gauges.value("host_folder_remaining_storage") == 2
    assert gauges.value("host_contract_count") == 42
    assert gauges.value("host_window_size") == 24
    assert gauges.value("host_upload") == 1024


def test_host_bandwidth_not_recognized_is_partial(client, gauges):
    client.host_bandwidth_get.side_effect = ModuleNotLoadedError("API call not recognized: /host/bandwidth")

    result = HostCollector(client, gauges).run()

    assert result.status == "partial"
    assert gauges.value("host_upload") == 0
    assert gauges.value("host_folder_total_storage") == 600


def test_host_missing_sections_default_to_zero(client, gauges):
    client.host_get.return_value = {"internalsettings": {"acceptingcontracts": False, "windowsize": 60}}

    HostCollector(client, gauges).run()

    assert gauges.value("host_accepting_contracts") == 0
    assert gauges.value("host_window_size") == 10
    assert gauges.value("host_collateral") == 0
    assert gauges.value("host_contract_count") == 0


def test_malformed_storage_payload_still_sets_settings(client, gauges):
    gauges.set("host_folder_total_storage", 7)
    client.host_storage_get.return_value = {
        "folders": [{"path": "/srv/sia/a", "capacity": None, "capacityremaining": 10}]
    }

    result = HostCollector(client, gauges).run()

    assert result.status == "partial"
    assert result.errors[0].startswith("host storage: ")
    assert gauges.value("host_contract_count") == 42
    assert gauges.value("host_collateral") == 432.0
    assert gauges.value("host_folder_total_storage") == 7
    assert gauges.value("host_upload") == 1024


def test_malformed_bandwidth_payload_is_partial(client, gauges):
    client.host_bandwidth_get.return_value = {"upload": "lots", "download": 1}

    result = HostCollector(client, gauges).run()

    assert result.status == "partial"
    assert result.errors[0].startswith("host bandwidth: ")
    assert gauges.value("host_upload") == 0
    assert gauges.value("host_folder_total_storage") == 600
