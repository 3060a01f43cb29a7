"""
Test automation models: suites own cases, cases own ordered steps.
"""

from typing import Any, Optional

from pydantic import BaseModel

from .request import Request

# Step variants understood by the runner; other strings are kept as-is
STEP_TYPES = ("request", "delay", "transfer", "script")


class StepConfig(BaseModel):
    """
    Variant payload of a test step.

    Request steps carry an embedded copy of a Request (and optionally the id
    of the project request it was copied from). Script steps carry their
    source text. Delay and transfer steps use the remaining fields.
    """
    request_id: Optional[str] = None
    request: Optional[Request] = None

    delay_ms: Optional[int] = None

    source_step_id: Optional[str] = None
    source_property: Optional[str] = None
    source_path: Optional[str] = None
    target_step_id: Optional[str] = None
    target_property: Optional[str] = None
    target_path: Optional[str] = None

    script_name: Optional[str] = None
    script_content: Optional[str] = None

    extra: dict[str, Any] = {}


class TestStep(BaseModel):
    """One step of a test case."""
    __test__ = False

    id: Optional[str] = None
    name: str
    type: str = "request"
    config: StepConfig = StepConfig()


class TestCase(BaseModel):
    """An ordered sequence of steps."""
    __test__ = False

    id: Optional[str] = None
    name: str
    steps: list[TestStep] = []


class TestSuite(BaseModel):
    """A named group of test cases."""
    __test__ = False

    id: Optional[str] = None
    name: str
    test_cases: list[TestCase] = []
