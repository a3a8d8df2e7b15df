"""
CloudFormation stack management utilities.
"""

from .base import (
    DEFAULT_CAPABILITIES,
    DELETE_COMPLETE,
    OperationHandle,
    StackService,
    StackSummary,
)
from .inventory import StackInventory
from .stack_manager import StackManager

__all__ = [
    "DEFAULT_CAPABILITIES",
    "DELETE_COMPLETE",
    "OperationHandle",
    "StackInventory",
    "StackManager",
    "StackService",
    "StackSummary",
]
