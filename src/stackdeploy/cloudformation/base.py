"""
Interface to the remote stack service.

The reconciliation core talks to CloudFormation only through StackService so
it can run against an in-memory implementation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

DELETE_COMPLETE = "DELETE_COMPLETE"

# Templates may declare IAM resources with or without explicit names
DEFAULT_CAPABILITIES = ["CAPABILITY_IAM", "CAPABILITY_NAMED_IAM"]

CREATE = "create"
UPDATE = "update"


@dataclass(frozen=True)
class StackSummary:
    """One entry of the remote stack inventory."""

    name: str
    status: str

    @property
    def deleted(self) -> bool:
        return self.status == DELETE_COMPLETE


@dataclass
class OperationHandle:
    """A create or update request accepted by the service."""

    stack_name: str
    operation: str
    stack_id: Optional[str] = None
    changed: bool = True


class StackService(ABC):
    """Capabilities the deployment core needs from the provisioning service.

    Implementations raise StackServiceError for any remote failure.
    """

    @abstractmethod
    def list_stack_pages(self) -> Iterator[List[StackSummary]]:
        """Yield every page of the stack inventory, deleted stacks included."""

    @abstractmethod
    def create_stack(
        self, stack_name: str, template_body: str, capabilities: List[str]
    ) -> OperationHandle:
        """Submit a create-stack request."""

    @abstractmethod
    def update_stack(
        self, stack_name: str, template_body: str, capabilities: List[str]
    ) -> OperationHandle:
        """Submit an update-stack request.

        A request with nothing to change returns a handle with ``changed=False``.
        """

    @abstractmethod
    def wait_for_stack(self, stack_name: str, operation: str, timeout: int) -> None:
        """Block until the operation completes, fails, or ``timeout`` seconds pass."""

    def get_stack_outputs(self, stack_name: str) -> Dict[str, str]:
        """Return the outputs of a stack."""
        return {}

    def get_failure_reasons(self, stack_name: str) -> List[str]:
        """Return human readable reasons for failed resources of a stack."""
        return []
