from __future__ import annotations
import json
from unittest.mock import patch

from siad_exporter import cli


@patch("siad_exporter.cli.NodeClient")
def test_collect_prints_snapshot(mock_client_cls, client, capsys):
    mock_client_cls.return_value = client

    rc = cli.main(["collect", "--modules", "consensus", "hostdb", "--api-addr", "http://node:9980"])

    assert rc == 0
    mock_client_cls.assert_called_once_with(addr="http://node:9980", password=None, timeout=None)
    document = json.loads(capsys.readouterr().out)
    assert document["exporter"]["modules_used"] == ["consensus", "hostdb"]
    assert document["metrics"]["consensus_height"] == 500000
    assert document["metrics"]["hostdb_offline_hosts"] == 3


@patch("siad_exporter.cli.NodeClient")
def test_collect_skips_unknown_modules(mock_client_cls, client, capsys):
    mock_client_cls.return_value = client

    rc = cli.main(["collect", "--modules", "bogus", "wallet"])

    assert rc == 0
    document = json.loads(capsys.readouterr().out)
    assert list(document["modules"]) == ["wallet"]


def test_collect_without_valid_modules_fails():
    assert cli.main(["collect", "--modules", "bogus"]) == 1


@patch("siad_exporter.cli.NodeClient")
def test_collect_writes_output_file(mock_client_cls, client, tmp_path):
    mock_client_cls.return_value = client
    out = tmp_path / "snapshot.json"

    rc = cli.main(["collect", "--modules", "host", "--output", str(out)])

    assert rc == 0
    document = json.loads(out.read_text())
    assert document["metrics"]["host_collateral"] == 432.0


@patch("siad_exporter.cli.NodeClient")
def test_single_argument_string_is_split(mock_client_cls, client, capsys):
    mock_client_cls.return_value = client

    rc = cli.main(["collect --modules consensus --no-validate"])

    assert rc == 0
    document = json.loads(capsys.readouterr().out)
    assert list(document["modules"]) == ["consensus"]
