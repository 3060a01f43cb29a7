"""
Entity kinds addressable by the tree locator.
"""

from enum import Enum


class EntityKind(str, Enum):
    PROJECT = "project"
    INTERFACE = "interface"
    OPERATION = "operation"
    REQUEST = "request"
    FOLDER = "folder"
    TEST_SUITE = "test_suite"
    TEST_CASE = "test_case"
    TEST_STEP = "test_step"


# Kinds that always carry a generated id and are matched by it alone
STABLE_ID_KINDS = frozenset({
    EntityKind.REQUEST,
    EntityKind.FOLDER,
    EntityKind.TEST_SUITE,
    EntityKind.TEST_CASE,
    EntityKind.TEST_STEP,
})
