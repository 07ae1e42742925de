"""Tests for the Ok/Err adapter and the command line.

Coverage:
- RegistryService wraps every operation in an envelope
- Error messages for each error kind
- CLI commands round-trip through a ledger file
"""

import json
import logging

import pytest
from click.testing import CliRunner

from registry.api import RegistryService
from registry.cli import main
from registry.core import memory_registry

PLOT_7 = {"location": "Plot 7", "owner": "Alice", "uniqueIdentifier": "CAD-001"}


@pytest.fixture
def service(clock, ids):
    return RegistryService(memory_registry(clock=clock, ids=ids))


class TestRegistryService:
    """Envelope mapping."""

    def test_add_returns_ok_record(self, service, clock):
        result = service.add_land(PLOT_7)

        assert result == {"Ok": {
            "landId": "L1",
            "location": "Plot 7",
            "owner": "Alice",
            "uniqueIdentifier": "CAD-001",
            "createdAt": clock.value,
            "updatedAt": None,
        }}

    def test_add_invalid_payload(self, service):
        result = service.add_land({"location": "", "owner": "Bob", "uniqueIdentifier": "X"})

        assert result == {"Err": "Invalid payload properties for adding a land."}
        assert service.get_lands() == {"Ok": []}

    def test_add_missing_keys_is_invalid(self, service):
        assert "Err" in service.add_land({"location": "Plot 7"})

    @pytest.mark.parametrize("payload", [None, "Plot 7", ["Plot 7", "Alice", "CAD-001"]])
    def test_non_dict_payload_returns_err(self, service, payload):
        assert service.add_land(payload) == {
            "Err": "Invalid payload properties for adding a land."
        }
        assert service.get_lands() == {"Ok": []}

    def test_non_dict_update_payload_returns_err(self, service):
        service.add_land(PLOT_7)

        assert service.update_land("L1", None) == {
            "Err": "Invalid ID or payload properties for updating a land."
        }
        assert service.get_land("L1")["Ok"]["location"] == "Plot 7"

    def test_get_land_not_found(self, service):
        assert service.get_land("L404") == {"Err": "Land with id=L404 not found"}

    def test_transfer_and_list_transactions(self, service, clock):
        service.add_land(PLOT_7)
        t1 = clock.advance(5)

        result = service.transfer_land("L1", "Bob")

        assert result["Ok"]["owner"] == "Bob"
        assert result["Ok"]["updatedAt"] == t1
        assert service.get_transactions() == {"Ok": [{
            "transactionId": "L2",
            "landId": "L1",
            "fromOwner": "Alice",
            "toOwner": "Bob",
            "createdAt": t1,
        }]}

    def test_update_and_delete(self, service):
        service.add_land(PLOT_7)

        updated = service.update_land(
            "L1", {"location": "Plot 8", "owner": "Carol", "uniqueIdentifier": "CAD-002"}
        )
        deleted = service.delete_land("L1")

        assert updated["Ok"]["location"] == "Plot 8"
        assert deleted == updated
        assert service.delete_land("L1") == {
            "Err": "Couldn't delete land with id=L1. Land not found"
        }

    def test_rejection_logged_with_error_code(self, service, caplog):
        with caplog.at_level(logging.INFO, logger="registry.api"):
            service.transfer_land("L404", "Bob")

        assert caplog.records[-1].error_code == "not_found"


class TestCli:
    """Command line round trips."""

    @pytest.fixture
    def run(self, db_path):
        runner = CliRunner()
        env = {"LAND_REGISTRY_LOG_LEVEL": "error"}
        root_level = logging.root.level

        def invoke(*args):
            return runner.invoke(main, ["--db", str(db_path), *args], env=env)

        yield invoke

        for handler in list(logging.root.handlers):
            if getattr(handler, "_land_registry", False):
                logging.root.removeHandler(handler)
        logging.root.setLevel(root_level)

    def test_add_transfer_and_list(self, run):
        added = run("add", "--location", "Plot 7", "--owner", "Alice", "--identifier", "CAD-001")
        assert added.exit_code == 0, added.output
        land_id = json.loads(added.output)["Ok"]["landId"]

        transferred = run("transfer", land_id, "Bob")
        assert transferred.exit_code == 0, transferred.output
        assert json.loads(transferred.output)["Ok"]["owner"] == "Bob"

        history = json.loads(run("transactions").output)["Ok"]
        assert [(tx["fromOwner"], tx["toOwner"]) for tx in history] == [("Alice", "Bob")]

        lands = json.loads(run("lands").output)["Ok"]
        assert [land["landId"] for land in lands] == [land_id]

    def test_update_show_and_delete(self, run):
        land_id = json.loads(
            run("add", "--location", "Plot 7", "--owner", "Alice", "--identifier", "CAD-001").output
        )["Ok"]["landId"]

        updated = run(
            "update", land_id, "--location", "Plot 9", "--owner", "Eve", "--identifier", "CAD-9"
        )
        assert json.loads(updated.output)["Ok"]["owner"] == "Eve"

        shown = json.loads(run("land", land_id).output)["Ok"]
        assert shown["location"] == "Plot 9"

        assert run("delete", land_id).exit_code == 0
        assert run("land", land_id).exit_code == 1

    def test_error_exits_nonzero(self, run):
        result = run("transfer", "missing", "Bob")

        assert result.exit_code == 1
        assert json.loads(result.output) == {
            "Err": "Couldn't transfer land with id=missing. Land not found"
        }

    def test_check_reports_status(self, run):
        result = run("check")

        assert result.exit_code == 0
        assert json.loads(result.output) == {"status": "normal"}
