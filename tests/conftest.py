"""
Shared fixtures for stackdeploy tests.
"""

from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import pytest

from stackdeploy.cloudformation.base import (
    CREATE,
    UPDATE,
    OperationHandle,
    StackService,
    StackSummary,
)
from stackdeploy.errors import StackServiceError
from stackdeploy.reporting import Reporter

SIMPLE_TEMPLATE = """AWSTemplateFormatVersion: "2010-09-09"
Resources:
  Topic:
    Type: AWS::SNS::Topic
"""


class FakeStackService(StackService):
    """In-memory stack service."""

    def __init__(self, page_size: int = 100):
        self.page_size = page_size
        self.summaries: List[StackSummary] = []
        self.templates: Dict[str, str] = {}
        self.calls: List[Tuple[str, str]] = []
        self.capabilities_seen: List[List[str]] = []
        self.outputs: Dict[str, Dict[str, str]] = {}
        self.failure_reasons: Dict[str, List[str]] = {}

        self.fail_on_page: Optional[int] = None
        self.submit_errors: Dict[str, str] = {}
        self.wait_errors: Dict[str, str] = {}

    def add_stack(self, name: str, status: str = "CREATE_COMPLETE") -> None:
        self.summaries.append(StackSummary(name=name, status=status))

    def list_stack_pages(self) -> Iterator[List[StackSummary]]:
        self.calls.append(("list", ""))
        for index in range(0, max(len(self.summaries), 1), self.page_size):
            if self.fail_on_page is not None and index // self.page_size == self.fail_on_page:
                raise StackServiceError("Rate exceeded")
            yield self.summaries[index:index + self.page_size]

    def _submit(self, operation: str, stack_name: str, template_body: str, capabilities: List[str]) -> OperationHandle:
        self.calls.append((operation, stack_name))
        self.capabilities_seen.append(list(capabilities))
        if stack_name in self.submit_errors:
            raise StackServiceError(self.submit_errors[stack_name])
        return OperationHandle(
            stack_name=stack_name,
            operation=operation,
            stack_id=f"arn:aws:cloudformation:us-east-1:123456789012:stack/{stack_name}/1",
        )

    def create_stack(self, stack_name: str, template_body: str, capabilities: List[str]) -> OperationHandle:
        handle = self._submit(CREATE, stack_name, template_body, capabilities)
        self.summaries.append(StackSummary(name=stack_name, status="CREATE_COMPLETE"))
        self.templates[stack_name] = template_body
        return handle

    def update_stack(self, stack_name: str, template_body: str, capabilities: List[str]) -> OperationHandle:
        handle = self._submit(UPDATE, stack_name, template_body, capabilities)
        if self.templates.get(stack_name) == template_body:
            handle.changed = False
            handle.stack_id = None
        self.templates[stack_name] = template_body
        return handle

    def wait_for_stack(self, stack_name: str, operation: str, timeout: int) -> None:
        self.calls.append(("wait", stack_name))
        if stack_name in self.wait_errors:
            raise StackServiceError(self.wait_errors[stack_name])

    def get_stack_outputs(self, stack_name: str) -> Dict[str, str]:
        return dict(self.outputs.get(stack_name, {}))

    def get_failure_reasons(self, stack_name: str) -> List[str]:
        return list(self.failure_reasons.get(stack_name, []))

    def operations(self) -> List[Tuple[str, str]]:
        """Submitted create/update calls, in order."""
        return [call for call in self.calls if call[0] in (CREATE, UPDATE)]


class RecordingReporter(Reporter):
    """Keep reported messages as (level, message) pairs."""

    def __init__(self) -> None:
        self.messages: List[Tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def warn(self, message: str) -> None:
        self.messages.append(("warn", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def by_level(self, level: str) -> List[str]:
        return [message for lvl, message in self.messages if lvl == level]


@pytest.fixture
def service() -> FakeStackService:
    return FakeStackService()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def template_file(tmp_path: Path) -> Path:
    path = tmp_path / "template.yaml"
    path.write_text(SIMPLE_TEMPLATE)
    return path

