"""
Existence checks against the remote stack inventory.
"""

import logging

from ..errors import InventoryScanError, StackServiceError
from .base import StackService

logger = logging.getLogger(__name__)


class StackInventory:
    """Answer whether a stack currently exists.

    Every call walks the full inventory again; nothing is cached between calls.
    """

    def __init__(self, service: StackService):
        self.service = service

    def exists(self, stack_name: str) -> bool:
        """
        Check whether a non-deleted stack with this exact name exists.

        Stacks in DELETE_COMPLETE are ignored so that a reused name is
        created again instead of updated.

        Raises:
            InventoryScanError: If any page could not be retrieved
        """
        pages = 0
        try:
            for page in self.service.list_stack_pages():
                pages += 1
                for stack in page:
                    if stack.deleted:
                        continue

                    if stack.name == stack_name:
                        logger.debug(
                            "Found stack %s (%s) on page %d", stack_name, stack.status, pages
                        )
                        return True
        except StackServiceError as e:
            raise InventoryScanError(
                f"Stack inventory scan failed after {pages} page(s): {e}"
            ) from e

        logger.debug("Stack %s not found in %d page(s)", stack_name, pages)
        return False
