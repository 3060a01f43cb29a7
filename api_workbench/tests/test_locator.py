"""
Tests for locating and renaming entities in a project tree.

Tests cover:
- Rename by id at any depth with structural sharing of untouched subtrees
- Name fallback for entities without an id
- Id-only matching for kinds that always carry an id
- Misses leave the tree untouched
"""

from api_workbench.models import (
    EntityKind,
    Folder,
    Interface,
    Operation,
    Project,
    Request,
    StepConfig,
    TestCase,
    TestStep,
    TestSuite,
)
from api_workbench.services.locator import locate, rename, replace_at, walk


def _tree() -> Project:
    return Project(
        name="Billing",
        interfaces=[
            Interface(
                id="if-1",
                name="BillingSoap",
                operations=[
                    Operation(name="GetInvoice", requests=[Request(id="req-1", name="Get Invoice")]),
                    Operation(name="ListInvoices"),
                ],
            ),
            Interface(name="Legacy", operations=[Operation(name="Ping")]),
        ],
        folders=[
            Folder(
                id="f-a",
                name="A",
                folders=[Folder(id="f-b", name="B", folders=[Folder(id="f-c", name="C")])],
                requests=[Request(id="req-2", name="Ping")],
            ),
            Folder(id="f-s", name="Sibling"),
            Folder(name="NoId"),
        ],
        test_suites=[
            TestSuite(
                id="s-1",
                name="Regression",
                test_cases=[
                    TestCase(
                        id="tc-1",
                        name="Flow",
                        steps=[
                            TestStep(
                                id="st-1",
                                name="Call",
                                config=StepConfig(request=Request(id="req-copy", name="Copy")),
                            )
                        ],
                    )
                ],
            )
        ],
    )


class TestRenameById:
    """Renames addressed by stable id."""

    def test_deep_folder_rename_shares_untouched_subtrees(self):
        tree = _tree()

        result = rename(tree, "f-c", EntityKind.FOLDER, "Renamed")

        assert result.found is True
        assert result.matched_by_id is True
        new = result.project
        renamed = new.folders[0].folders[0].folders[0]
        assert renamed.name == "Renamed"
        assert renamed.id == "f-c"
        # Siblings and other branches are the very same objects
        assert new.folders[1] is tree.folders[1]
        assert new.folders[2] is tree.folders[2]
        assert new.interfaces is tree.interfaces
        assert new.test_suites is tree.test_suites
        assert new.folders[0].requests is tree.folders[0].requests
        # Path from the root is copied
        assert new is not tree
        assert new.folders[0] is not tree.folders[0]

    def test_input_tree_is_unchanged(self):
        tree = _tree()
        before = tree.model_dump()

        rename(tree, "f-c", EntityKind.FOLDER, "Renamed")

        assert tree.model_dump() == before

    def test_request_in_operation(self):
        result = rename(_tree(), "req-1", EntityKind.REQUEST, "Fetch Invoice")

        assert result.found
        assert result.project.interfaces[0].operations[0].requests[0].name == "Fetch Invoice"

    def test_request_in_folder(self):
        result = rename(_tree(), "req-2", EntityKind.REQUEST, "Pong")

        assert result.project.folders[0].requests[0].name == "Pong"

    def test_test_case_and_step(self):
        tree = _tree()

        case_result = rename(tree, "tc-1", EntityKind.TEST_CASE, "Renamed Flow")
        step_result = rename(case_result.project, "st-1", EntityKind.TEST_STEP, "Renamed Call")

        case = step_result.project.test_suites[0].test_cases[0]
        assert case.name == "Renamed Flow"
        assert case.steps[0].name == "Renamed Call"

    def test_interface_with_id_is_not_matched_by_name(self):
        result = rename(_tree(), "BillingSoap", EntityKind.INTERFACE, "X")

        assert result.found is False


class TestRenameByName:
    """Name fallback for entities without an id."""

    def test_project_matched_by_name(self):
        tree = _tree()

        result = rename(tree, "Billing", EntityKind.PROJECT, "Invoicing")

        assert result.found is True
        assert result.matched_by_id is False
        assert result.project.name == "Invoicing"
        assert result.project.folders is tree.folders

    def test_interface_without_id_matched_by_name(self):
        result = rename(_tree(), "Legacy", EntityKind.INTERFACE, "Modern")

        assert result.found is True
        assert result.matched_by_id is False
        assert result.project.interfaces[1].name == "Modern"

    def test_operation_matched_by_name(self):
        result = rename(_tree(), "ListInvoices", EntityKind.OPERATION, "FindInvoices")

        assert result.project.interfaces[0].operations[1].name == "FindInvoices"

    def test_first_match_in_tree_order_wins(self):
        tree = _tree()
        tree.interfaces[1].operations.append(Operation(name="GetInvoice"))

        location = locate(tree, "GetInvoice", EntityKind.OPERATION)

        assert location.path == (("interfaces", 0), ("operations", 0))


class TestRenameMiss:
    """Targets that match nothing."""

    def test_unknown_id_returns_same_tree(self):
        tree = _tree()

        result = rename(tree, "nope", EntityKind.FOLDER, "X")

        assert result.found is False
        assert result.project is tree

    def test_stable_kinds_never_match_by_name(self):
        result = rename(_tree(), "NoId", EntityKind.FOLDER, "X")

        assert result.found is False

    def test_kind_must_match(self):
        result = rename(_tree(), "f-a", EntityKind.REQUEST, "X")

        assert result.found is False

    def test_request_copies_inside_steps_are_not_tree_nodes(self):
        result = rename(_tree(), "req-copy", EntityKind.REQUEST, "X")

        assert result.found is False


class TestTreeHelpers:
    """Tests for walk and replace_at."""

    def test_walk_visits_every_node_once(self):
        nodes = list(walk(_tree()))

        # project, 2 interfaces, 3 operations, 2 requests, 5 folders, suite, case, step
        assert len(nodes) == 16
        assert nodes[0][1] == ()

    def test_replace_at_root(self):
        tree = _tree()

        new = replace_at(tree, (), lambda node: node.model_copy(update={"description": "d"}))

        assert new.description == "d"
        assert tree.description is None
