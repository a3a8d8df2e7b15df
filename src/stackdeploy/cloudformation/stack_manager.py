"""
CloudFormation stack operations.
"""

import logging
import math
from typing import Any, Dict, Iterator, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError, WaiterError

from ..errors import StackServiceError
from .base import CREATE, UPDATE, OperationHandle, StackService, StackSummary

logger = logging.getLogger(__name__)

NO_UPDATES_MESSAGE = "No updates are to be performed"

WAITERS = {
    CREATE: "stack_create_complete",
    UPDATE: "stack_update_complete",
}

# Stack-level events that mark the start of an operation
OPERATION_START_STATUSES = ("CREATE_IN_PROGRESS", "UPDATE_IN_PROGRESS")


class StackManager(StackService):
    """Manage CloudFormation stack operations through boto3."""

    def __init__(
        self,
        session: Optional[boto3.Session] = None,
        region: Optional[str] = None,
        profile: Optional[str] = None,
        poll_interval: int = 30,
    ):
        """
        Initialize stack manager.

        Args:
            session: Preconfigured boto3 session (built from region/profile if omitted)
            region: AWS region
            profile: AWS profile to use
            poll_interval: Seconds between waiter polls
        """
        if session is None:
            session_args = {}
            if region:
                session_args["region_name"] = region
            if profile:
                session_args["profile_name"] = profile
            session = boto3.Session(**session_args)

        self.region = region or session.region_name
        self.poll_interval = poll_interval
        self.cloudformation = session.client("cloudformation")

    def list_stack_pages(self) -> Iterator[List[StackSummary]]:
        """Yield every page of ListStacks."""
        try:
            paginator = self.cloudformation.get_paginator("list_stacks")
            for page in paginator.paginate():
                yield [
                    StackSummary(name=stack["StackName"], status=stack["StackStatus"])
                    for stack in page.get("StackSummaries", [])
                ]
        except (ClientError, BotoCoreError) as e:
            raise StackServiceError(f"Failed to list stacks: {e}") from e

    def create_stack(
        self, stack_name: str, template_body: str, capabilities: List[str]
    ) -> OperationHandle:
        """Submit CreateStack."""
        try:
            response = self.cloudformation.create_stack(
                StackName=stack_name,
                TemplateBody=template_body,
                Capabilities=list(capabilities),
            )
        except (ClientError, BotoCoreError) as e:
            raise StackServiceError(str(e)) from e

        return OperationHandle(
            stack_name=stack_name, operation=CREATE, stack_id=response.get("StackId")
        )

    def update_stack(
        self, stack_name: str, template_body: str, capabilities: List[str]
    ) -> OperationHandle:
        """Submit UpdateStack, treating an empty change set as a no-op."""
        try:
            response = self.cloudformation.update_stack(
                StackName=stack_name,
                TemplateBody=template_body,
                Capabilities=list(capabilities),
            )
        except ClientError as e:
            if NO_UPDATES_MESSAGE in str(e):
                logger.debug("Stack %s is already up to date", stack_name)
                return OperationHandle(stack_name=stack_name, operation=UPDATE, changed=False)
            raise StackServiceError(str(e)) from e
        except BotoCoreError as e:
            raise StackServiceError(str(e)) from e

        return OperationHandle(
            stack_name=stack_name, operation=UPDATE, stack_id=response.get("StackId")
        )

    def wait_for_stack(self, stack_name: str, operation: str, timeout: int) -> None:
        """Wait for a create/update to reach a terminal state.

        The waiter polls before its first sleep, so one extra attempt is
        needed for the sleeps between polls to add up to ``timeout``.
        """
        delay = max(1, min(self.poll_interval, timeout))
        max_attempts = math.ceil(timeout / delay) + 1

        logger.debug(
            "Waiting for %s of %s (delay=%ss, max_attempts=%s)",
            operation,
            stack_name,
            delay,
            max_attempts,
        )

        try:
            waiter = self.cloudformation.get_waiter(WAITERS[operation])
            waiter.wait(
                StackName=stack_name,
                WaiterConfig={"Delay": delay, "MaxAttempts": max_attempts},
            )
        except WaiterError as e:
            if "Max attempts exceeded" in str(e):
                raise StackServiceError(
                    f"timed out after {timeout} seconds waiting for {stack_name}"
                ) from e
            raise StackServiceError(str(e)) from e
        except (ClientError, BotoCoreError) as e:
            raise StackServiceError(str(e)) from e

    def get_stack_outputs(self, stack_name: str) -> Dict[str, str]:
        """Get outputs from a CloudFormation stack."""
        try:
            response = self.cloudformation.describe_stacks(StackName=stack_name)
        except (ClientError, BotoCoreError) as e:
            raise StackServiceError(f"Failed to describe stack {stack_name}: {e}") from e

        outputs = {}
        if response["Stacks"]:
            for output in response["Stacks"][0].get("Outputs", []):
                outputs[output["OutputKey"]] = output["OutputValue"]
        return outputs

    def get_failure_reasons(self, stack_name: str) -> List[str]:
        """Collect failed resource events of the most recent stack operation."""
        reasons: List[str] = []
        # Events are returned newest first
        for event in self._stack_events(stack_name):
            if "FAILED" in event.get("ResourceStatus", ""):
                reason = self._format_failure(event)
                if reason not in reasons:
                    reasons.append(reason)

            if (
                event.get("LogicalResourceId") == stack_name
                and event.get("ResourceStatus") in OPERATION_START_STATUSES
            ):
                break

        return reasons

    def _stack_events(self, stack_name: str) -> Iterator[Dict[str, Any]]:
        """Yield stack events across every DescribeStackEvents page."""
        try:
            paginator = self.cloudformation.get_paginator("describe_stack_events")
            for page in paginator.paginate(StackName=stack_name):
                yield from page.get("StackEvents", [])
        except (ClientError, BotoCoreError) as e:
            raise StackServiceError(
                f"Failed to describe events for stack {stack_name}: {e}"
            ) from e

    @staticmethod
    def _format_failure(event: Dict[str, Any]) -> str:
        return (
            f"{event['LogicalResourceId']} ({event['ResourceType']}) "
            f"{event['ResourceStatus']}: "
            f"{event.get('ResourceStatusReason', 'No reason provided')}"
        )
