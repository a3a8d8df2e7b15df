"""
Exception hierarchy for stack deployments.

Everything raised on purpose derives from StackDeployError so the CLI has a
single catch point. Only TemplateLoadError is recovered inside a run.
"""

from typing import List, Optional


class StackDeployError(Exception):
    """Base exception for all stackdeploy errors."""


class ConfigError(StackDeployError):
    """Deployment configuration is missing or invalid, or the AWS session could not be resolved."""


class TemplateLoadError(StackDeployError):
    """A stack template could not be read from disk."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load template {path}: {reason}")


class StackServiceError(StackDeployError):
    """Raw failure reported by a stack service implementation."""


class InventoryScanError(StackDeployError):
    """Listing the existing stacks failed before the scan completed."""


class OperationError(StackDeployError):
    """A create or update operation on a stack did not succeed."""

    def __init__(self, stack_name: str, operation: str, message: str):
        self.stack_name = stack_name
        self.operation = operation
        super().__init__(message)


class OperationSubmitError(OperationError):
    """The create/update request was rejected by CloudFormation."""

    def __init__(self, stack_name: str, operation: str, cause: str):
        self.cause = cause
        super().__init__(
            stack_name, operation, f"Stack {operation} of {stack_name} was rejected: {cause}"
        )


class OperationWaitError(OperationError):
    """The submitted operation failed, or did not finish within the wait budget."""

    def __init__(
        self,
        stack_name: str,
        operation: str,
        cause: str,
        reasons: Optional[List[str]] = None,
    ):
        self.cause = cause
        self.reasons = reasons or []
        message = f"Stack {operation} of {stack_name} did not complete: {cause}"
        if self.reasons:
            message += "\n" + "\n".join(f"  - {reason}" for reason in self.reasons)
        super().__init__(stack_name, operation, message)
