"""Tests for TransactionLog and Registry.check_consistency.

Coverage:
- append/list/for_land
- Duplicate transaction ids refused
- Consistency check on clean, corrupt and misfiled ledgers
"""

import logging

import pytest

from registry.core import Registry, SystemStatus
from registry.exceptions import NotFound, StorageFailure
from registry.models import LandPayload, Transaction


def make_transaction(transaction_id: str, land_id: str, created_at: int) -> Transaction:
    return Transaction(
        transaction_id=transaction_id,
        land_id=land_id,
        from_owner="Alice",
        to_owner="Bob",
        created_at=created_at,
    )


class TestTransactionLog:
    """Append-only log behaviour."""

    def test_append_and_list(self, any_registry):
        tx = make_transaction("T1", "L1", 10)
        any_registry.transactions.append(tx)

        assert any_registry.transactions.list() == [tx]
        assert len(any_registry.transactions) == 1

    def test_append_refuses_duplicate_id(self, any_registry):
        any_registry.transactions.append(make_transaction("T1", "L1", 10))

        with pytest.raises(StorageFailure, match="already recorded") as exc_info:
            any_registry.transactions.append(make_transaction("T1", "L9", 99))

        assert exc_info.value.key == "T1"
        assert any_registry.transactions.list()[0].land_id == "L1"

    def test_for_land_orders_by_time(self, any_registry):
        any_registry.transactions.append(make_transaction("Tc", "L1", 30))
        any_registry.transactions.append(make_transaction("Ta", "L1", 20))
        any_registry.transactions.append(make_transaction("Tb", "L2", 10))

        history = any_registry.transactions.for_land("L1")

        assert [tx.transaction_id for tx in history] == ["Ta", "Tc"]

    def test_for_unknown_land_is_empty(self, any_registry):
        assert any_registry.transactions.for_land("nope") == []

    def test_log_exposes_no_mutation(self, any_registry):
        log = any_registry.transactions

        assert not hasattr(log, "update")
        assert not hasattr(log, "delete")
        assert not hasattr(log, "remove")


class TestConsistencyCheck:
    """Tests for Registry.check_consistency."""

    def test_clean_ledger_is_normal(self, any_registry):
        land = any_registry.lands.add(
            LandPayload(location="Plot 7", owner="Alice", unique_identifier="CAD-001")
        )
        any_registry.lands.transfer(land.land_id, "Bob")

        assert any_registry.check_consistency() == SystemStatus.NORMAL

    def test_corrupt_row_enters_safe_mode(self, registry, caplog):
        registry.db._get_connection().execute(
            "INSERT INTO land_transaction (key, data) VALUES ('T9', 'garbage')"
        )

        with caplog.at_level(logging.WARNING, logger="registry.core"):
            status = registry.check_consistency()

        assert status == SystemStatus.SAFE_MODE
        assert "land_transaction/T9: unreadable" in caplog.text

    def test_misfiled_record_enters_safe_mode(self, registry):
        land = registry.lands.add(
            LandPayload(location="Plot 7", owner="Alice", unique_identifier="CAD-001")
        )
        registry._land_store.insert("other-key", land)

        assert registry.check_consistency() == SystemStatus.SAFE_MODE

    def test_registry_keeps_serving_in_safe_mode(self, registry):
        registry.db._get_connection().execute(
            "INSERT INTO land (key, data) VALUES ('broken', '{}')"
        )
        assert registry.check_consistency() == SystemStatus.SAFE_MODE

        land = registry.lands.add(
            LandPayload(location="Plot 7", owner="Alice", unique_identifier="CAD-001")
        )
        assert registry.lands.get(land.land_id) == land

    def test_deleting_unreadable_land_restores_normal(self, registry):
        registry.db._get_connection().execute(
            "INSERT INTO land (key, data) VALUES ('broken', 'garbage')"
        )
        assert registry.check_consistency() == SystemStatus.SAFE_MODE

        with pytest.raises(NotFound):
            registry.lands.delete("broken")

        assert registry.check_consistency() == SystemStatus.NORMAL

    def test_registry_is_context_manager(self, db_path):
        from registry.core import open_registry

        with open_registry(db_path) as reg:
            assert isinstance(reg, Registry)
            assert reg.lands.list() == []
