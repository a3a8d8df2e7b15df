"""
Deployment of configured stacks.
"""

from .dispatcher import DeploymentStatus, OperationPhase, OperationResult, StackDispatcher
from .runner import DeploymentRunner
from .templates import load_template

__all__ = [
    "DeploymentRunner",
    "DeploymentStatus",
    "OperationPhase",
    "OperationResult",
    "StackDispatcher",
    "load_template",
]
