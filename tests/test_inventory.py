"""
Tests for stack existence checks.
"""

import pytest

from conftest import FakeStackService
from stackdeploy.cloudformation.base import DELETE_COMPLETE
from stackdeploy.cloudformation.inventory import StackInventory
from stackdeploy.errors import InventoryScanError


class TestStackInventory:
    """Test StackInventory.exists."""

    def test_existing_stack(self, service: FakeStackService) -> None:
        """Test a live stack is reported as existing."""
        service.add_stack("network", "UPDATE_COMPLETE")

        assert StackInventory(service).exists("network") is True

    def test_missing_stack(self, service: FakeStackService) -> None:
        """Test an unknown name is reported as missing."""
        service.add_stack("network")

        assert StackInventory(service).exists("database") is False

    def test_empty_inventory(self, service: FakeStackService) -> None:
        """Test an empty account has no stacks."""
        assert StackInventory(service).exists("network") is False

    def test_deleted_stack_is_absent(self, service: FakeStackService) -> None:
        """Test DELETE_COMPLETE entries are ignored."""
        service.add_stack("network", DELETE_COMPLETE)
        service.add_stack("network", DELETE_COMPLETE)

        assert StackInventory(service).exists("network") is False

    def test_reused_name_after_delete(self, service: FakeStackService) -> None:
        """Test a deleted entry does not hide a live stack of the same name."""
        service.add_stack("network", DELETE_COMPLETE)
        service.add_stack("network", "CREATE_IN_PROGRESS")

        assert StackInventory(service).exists("network") is True

    @pytest.mark.parametrize(
        "status",
        ["ROLLBACK_COMPLETE", "DELETE_FAILED", "DELETE_IN_PROGRESS", "REVIEW_IN_PROGRESS"],
    )
    def test_non_deleted_statuses_exist(self, service: FakeStackService, status: str) -> None:
        """Test every status other than DELETE_COMPLETE counts as existing."""
        service.add_stack("network", status)

        assert StackInventory(service).exists("network") is True

    def test_exact_name_match(self, service: FakeStackService) -> None:
        """Test names are compared exactly."""
        service.add_stack("network-dev")
        service.add_stack("Network")

        assert StackInventory(service).exists("network") is False

    def test_match_on_last_page(self) -> None:
        """Test a name found only on the last of five pages."""
        service = FakeStackService(page_size=1)
        for name in ["a", "b", "c", "d", "target"]:
            service.add_stack(name)

        assert StackInventory(service).exists("target") is True

    def test_scan_error_is_fatal(self) -> None:
        """Test a failing page raises instead of answering False."""
        service = FakeStackService(page_size=1)
        for name in ["a", "b", "c", "target"]:
            service.add_stack(name)
        service.fail_on_page = 2

        with pytest.raises(InventoryScanError) as exc_info:
            StackInventory(service).exists("target")

        assert "2 page(s)" in str(exc_info.value)

    def test_scan_is_repeated_every_call(self, service: FakeStackService) -> None:
        """Test results are not cached between calls."""
        inventory = StackInventory(service)

        assert inventory.exists("network") is False
        service.add_stack("network")
        assert inventory.exists("network") is True
