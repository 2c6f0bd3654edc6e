"""End-to-end tests for the click CLI against JSON files in a temp dir."""

import pytest
from click.testing import CliRunner

from bookstore.infrastructure.bootstrap import DATA_DIR_ENV
from bookstore.infrastructure.cli.main import cli


@pytest.fixture
def run(tmp_path, monkeypatch):
    monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path))
    runner = CliRunner()

    def _run(*args):
        return runner.invoke(cli, list(args))

    return _run


def _create_order(run, *extra):
    return run(
        "order", "create", "--customer", "C1",
        "--street", "1 Main St", "--city", "Springfield",
        "--region", "IL", "--postal-code", "62701", *extra,
    )


class TestBookCommands:

    def test_add_and_list(self, run):
        result = run("book", "add", "--title", "Dune", "--price", "30.00")
        assert result.exit_code == 0, result.output
        assert "Book #1 'Dune' added at $30.00" in result.output

        listing = run("book", "list")
        assert "Dune" in listing.output

    def test_duplicate_title_is_an_error(self, run):
        run("book", "add", "--title", "Dune", "--price", "30.00")
        result = run("book", "add", "--title", "Dune", "--price", "31.00")
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_update_unknown_book(self, run):
        result = run("book", "update", "--id", "42", "--price", "5")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestOrderCommands:

    def test_full_flow(self, run, tmp_path):
        run("book", "add", "--title", "Dune", "--price", "30.00")

        result = _create_order(run, "--items", "Dune:2")
        assert result.exit_code == 0, result.output
        assert "Order O1 created" in result.output
        assert "$60.00" in result.output

        assert run("order", "discount", "--id", "O1", "--code", "welcome", "--amount", "20").exit_code == 0
        result = run("order", "pay", "--id", "O1", "--type", "card", "--amount", "40")
        assert "Balance due $0.00" in result.output

        assert run("order", "status", "--id", "O1", "--to", "processing").exit_code == 0
        result = run("order", "ship", "--id", "O1", "--book", "Dune")
        assert result.exit_code == 0, result.output
        assert "shipment #1 created" in result.output

        shown = run("order", "show", "--id", "O1")
        assert "status=PROCESSING" in shown.output
        assert "Balance Due" in shown.output
        assert "-$40.00" in shown.output
        assert "Shipment #1  (status=PENDING)" in shown.output

        assert (tmp_path / "orders.json").exists()

    def test_zero_quantity_is_an_error(self, run):
        run("book", "add", "--title", "Dune", "--price", "30.00")
        _create_order(run)
        result = run("order", "add-line", "--id", "O1", "--book", "Dune", "--quantity", "0")
        assert result.exit_code == 1
        assert "must be positive" in result.output

    def test_bad_items_format(self, run):
        result = _create_order(run, "--items", "Dune")
        assert result.exit_code == 2
        assert "Expected 'Book:Quantity'" in result.output

    def test_show_missing_order(self, run):
        result = run("order", "show", "--id", "O9")
        assert result.exit_code == 1
        assert "Order O9 not found" in result.output

    def test_list_by_customer(self, run):
        _create_order(run)
        _create_order(run)
        result = run("order", "list", "--customer", "C1")
        assert "O1" in result.output and "O2" in result.output

        empty = run("order", "list", "--customer", "C2")
        assert "No orders found for customer C2." in empty.output

    def test_invalid_transition_is_an_error(self, run):
        _create_order(run)
        result = run("order", "status", "--id", "O1", "--to", "DELIVERED")
        assert result.exit_code == 1
        assert "Cannot move order O1 from NEW to DELIVERED" in result.output

    def test_shipment_status(self, run):
        run("book", "add", "--title", "Dune", "--price", "30.00")
        _create_order(run, "--items", "Dune:1")
        run("order", "ship", "--id", "O1", "--book", "1")

        result = run("order", "shipment-status", "--id", "O1", "--shipment", "1", "--to", "in_transit")
        assert result.exit_code == 0, result.output
        assert "shipment #1 is now IN_TRANSIT" in result.output

    def test_remove_line(self, run):
        run("book", "add", "--title", "Dune", "--price", "30.00")
        _create_order(run, "--items", "Dune:1")
        result = run("order", "remove-line", "--id", "O1", "--book", "1")
        assert result.exit_code == 0, result.output
        assert "Total $0.00" in result.output
