"""
Create-or-update dispatch for a single stack.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from ..cloudformation.base import CREATE, DEFAULT_CAPABILITIES, UPDATE, StackService
from ..cloudformation.inventory import StackInventory
from ..config import DEFAULT_TIMEOUT
from ..errors import OperationError, OperationSubmitError, OperationWaitError, StackServiceError
from ..reporting import NullReporter, Reporter

logger = logging.getLogger(__name__)


class DeploymentStatus(Enum):
    """Status of a stack operation."""
    SUCCESS = "success"
    FAILED = "failed"


class OperationPhase(Enum):
    """Phase in which a stack operation failed."""
    SUBMIT = "submit"
    AWAIT = "await"


@dataclass
class OperationResult:
    """Result of reconciling one stack."""
    stack_name: str
    operation: str
    status: DeploymentStatus
    duration: float
    stack_id: Optional[str] = None
    changed: bool = True
    outputs: Dict[str, str] = field(default_factory=dict)
    phase: Optional[OperationPhase] = None
    error: Optional[OperationError] = None

    @property
    def success(self) -> bool:
        """Check if the operation was successful."""
        return self.status == DeploymentStatus.SUCCESS


class StackDispatcher:
    """Decide between create and update, submit it, and wait for the outcome."""

    def __init__(
        self,
        service: StackService,
        inventory: Optional[StackInventory] = None,
        timeout: int = DEFAULT_TIMEOUT,
        capabilities: Optional[List[str]] = None,
        reporter: Optional[Reporter] = None,
    ):
        """
        Initialize dispatcher.

        Args:
            service: Remote stack service
            inventory: Existence check (built on ``service`` if not provided)
            timeout: Seconds to wait for an operation to complete
            capabilities: Capabilities acknowledged on create/update
            reporter: Progress reporter
        """
        self.service = service
        self.inventory = inventory or StackInventory(service)
        self.timeout = timeout
        self.capabilities = list(capabilities or DEFAULT_CAPABILITIES)
        self.reporter = reporter or NullReporter()

    def reconcile(self, stack_name: str, template_body: str) -> OperationResult:
        """
        Create or update a stack so it matches the template.

        Args:
            stack_name: CloudFormation stack name
            template_body: Template document

        Returns:
            OperationResult; on failure ``phase`` and ``error`` say what went wrong

        Raises:
            InventoryScanError: If the existence check could not complete
        """
        start_time = time.time()

        self.reporter.info(f"Checking if stack {stack_name} exists")
        if self.inventory.exists(stack_name):
            self.reporter.info(f"Stack {stack_name} exists, updating")
            operation = UPDATE
            submit = self.service.update_stack
        else:
            self.reporter.info(f"Stack {stack_name} does not exist, creating")
            operation = CREATE
            submit = self.service.create_stack

        try:
            handle = submit(stack_name, template_body, self.capabilities)
        except StackServiceError as e:
            return self._failed(
                stack_name,
                operation,
                OperationPhase.SUBMIT,
                OperationSubmitError(stack_name, operation, str(e)),
                start_time,
            )

        if not handle.changed:
            self.reporter.info(f"No updates to be performed on stack {stack_name}")
        else:
            self.reporter.info(f"Waiting for stack {operation} of {stack_name} to complete")
            try:
                self.service.wait_for_stack(stack_name, operation, self.timeout)
            except StackServiceError as e:
                error = OperationWaitError(
                    stack_name, operation, str(e), self._failure_reasons(stack_name)
                )
                return self._failed(
                    stack_name, operation, OperationPhase.AWAIT, error, start_time
                )

        return OperationResult(
            stack_name=stack_name,
            operation=operation,
            status=DeploymentStatus.SUCCESS,
            duration=time.time() - start_time,
            stack_id=handle.stack_id,
            changed=handle.changed,
            outputs=self._outputs(stack_name),
        )

    def _failed(
        self,
        stack_name: str,
        operation: str,
        phase: OperationPhase,
        error: OperationError,
        start_time: float,
    ) -> OperationResult:
        logger.debug("Stack %s failed during %s: %s", stack_name, phase.value, error)
        return OperationResult(
            stack_name=stack_name,
            operation=operation,
            status=DeploymentStatus.FAILED,
            duration=time.time() - start_time,
            phase=phase,
            error=error,
        )

    def _failure_reasons(self, stack_name: str) -> List[str]:
        try:
            return self.service.get_failure_reasons(stack_name)
        except StackServiceError as e:
            self.reporter.warn(f"Could not retrieve stack events: {e}")
            return []

    def _outputs(self, stack_name: str) -> Dict[str, str]:
        try:
            return self.service.get_stack_outputs(stack_name)
        except StackServiceError as e:
            self.reporter.warn(f"Failed to get stack outputs: {e}")
            return {}
