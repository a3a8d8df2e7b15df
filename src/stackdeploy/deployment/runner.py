"""
Sequential deployment of the configured stacks.
"""

import logging
from typing import Callable, List, Optional, Sequence

from ..config import StackSpec
from ..errors import InventoryScanError, TemplateLoadError
from ..reporting import NullReporter, Reporter
from .dispatcher import OperationResult, StackDispatcher
from .templates import load_template

logger = logging.getLogger(__name__)


class DeploymentRunner:
    """Deploy stacks one at a time, in declaration order.

    A template that cannot be loaded skips that stack only. A failed stack
    operation halts the run: the error is reported and re-raised, and the
    remaining stacks are not attempted.
    """

    def __init__(
        self,
        dispatcher: StackDispatcher,
        reporter: Optional[Reporter] = None,
        template_loader: Callable[[str], str] = load_template,
    ):
        self.dispatcher = dispatcher
        self.reporter = reporter or NullReporter()
        self.template_loader = template_loader

        # Run state
        self.deployed: List[str] = []
        self.skipped: List[str] = []
        self.results: List[OperationResult] = []

    def run(self, stacks: Sequence[StackSpec]) -> None:
        """
        Deploy every stack.

        Raises:
            OperationSubmitError: If CloudFormation rejected a create/update
            OperationWaitError: If an operation failed or timed out
            InventoryScanError: If the existence check failed
        """
        for stack in stacks:
            try:
                template = self.template_loader(stack.template_path)
            except TemplateLoadError as e:
                self.reporter.warn(f"Skipping stack {stack.name}: {e}")
                self.skipped.append(stack.name)
                continue

            try:
                result = self.dispatcher.reconcile(stack.name, template)
            except InventoryScanError as e:
                self.reporter.error(f"Deploy of stack {stack.name} failed during inventory scan")
                self.reporter.error(str(e))
                raise
            self.results.append(result)

            if not result.success:
                self.reporter.error(
                    f"Deploy of stack {stack.name} failed during {result.phase.value}"
                )
                self.reporter.error(str(result.error))
                raise result.error

            self.reporter.success(f"Successfully deployed stack {stack.name}")
            for key, value in result.outputs.items():
                self.reporter.info(f"  {key}: {value}")
            self.deployed.append(stack.name)

        logger.debug(
            "Run finished: %d deployed, %d skipped", len(self.deployed), len(self.skipped)
        )
