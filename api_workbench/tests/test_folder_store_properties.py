"""
Property-based tests for the folder project store.

Uses Hypothesis to verify that arbitrary project trees survive a save/load
cycle and that saving is idempotent, including trees whose sibling names
collide after sanitization.
"""

import tempfile
from pathlib import Path

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from api_workbench.models import (
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
from api_workbench.services.folder_store import FolderFormatStore


# Small alphabet so that sanitize collisions ("a b" vs "a_b", "A" vs "a") are common
name_strategy = st.text(
    alphabet=st.sampled_from("abAB01 _-.?"),
    min_size=1,
    max_size=8,
)

body_strategy = st.text(max_size=40)

id_strategy = st.uuids().map(lambda value: value.hex[:12])


@st.composite
def request_strategy(draw):
    return Request(
        id=f"req-{draw(id_strategy)}",
        name=draw(name_strategy),
        body=draw(body_strategy),
        method=draw(st.sampled_from([None, "GET", "POST"])),
        headers=draw(st.dictionaries(name_strategy, name_strategy, max_size=2)),
    )


def folder_strategy(depth: int):
    @st.composite
    def build(draw):
        children = draw(st.lists(folder_strategy(depth - 1), max_size=2)) if depth > 0 else []
        return Folder(
            id=f"folder-{draw(id_strategy)}",
            name=draw(name_strategy),
            expanded=draw(st.booleans()),
            requests=draw(st.lists(request_strategy(), max_size=2)),
            folders=children,
        )
    return build()


@st.composite
def step_strategy(draw):
    step_type = draw(st.sampled_from(["request", "delay", "script"]))
    if step_type == "request":
        step_config = StepConfig(request=draw(request_strategy()))
    elif step_type == "delay":
        step_config = StepConfig(delay_ms=draw(st.integers(min_value=0, max_value=10_000)))
    else:
        step_config = StepConfig(script_content=draw(body_strategy))
    return TestStep(id=f"step-{draw(id_strategy)}", name=draw(name_strategy), type=step_type, config=step_config)


@st.composite
def project_strategy(draw):
    interfaces = [
        Interface(
            id=f"if-{draw(id_strategy)}",
            name=draw(name_strategy),
            operations=[
                Operation(
                    id=f"op-{draw(id_strategy)}",
                    name=draw(name_strategy),
                    action=draw(name_strategy),
                    requests=draw(st.lists(request_strategy(), max_size=3)),
                )
                for _ in range(draw(st.integers(min_value=0, max_value=2)))
            ],
        )
        for _ in range(draw(st.integers(min_value=0, max_value=2)))
    ]
    suites = [
        TestSuite(
            id=f"suite-{draw(id_strategy)}",
            name=draw(name_strategy),
            test_cases=[
                TestCase(
                    id=f"tc-{draw(id_strategy)}",
                    name=draw(name_strategy),
                    steps=draw(st.lists(step_strategy(), max_size=4)),
                )
                for _ in range(draw(st.integers(min_value=0, max_value=3)))
            ],
        )
        for _ in range(draw(st.integers(min_value=0, max_value=2)))
    ]
    return Project(
        id=f"proj-{draw(id_strategy)}",
        name=draw(name_strategy),
        description=draw(st.one_of(st.none(), body_strategy)),
        interfaces=interfaces,
        folders=draw(st.lists(folder_strategy(2), max_size=3)),
        test_suites=suites,
    )


def _snapshot(root: Path) -> dict[str, bytes]:
    return {
        str(path.relative_to(root)): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


class TestFolderStoreRoundTrip:
    """
    Property: load(save(tree)) equals tree.

    Holds for any tree, including siblings whose names differ only in case
    or in characters that sanitize away.
    """

    @given(project=project_strategy())
    @settings(max_examples=40, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    def test_save_then_load_returns_equal_tree(self, project: Project):
        store = FolderFormatStore()
        with tempfile.TemporaryDirectory() as tmp:
            location = Path(tmp) / "project"
            store.save(project, location)
            loaded = store.load(location)

        assert loaded.model_dump(exclude={"location"}) == project.model_dump(exclude={"location"})


class TestFolderStoreIdempotence:
    """
    Property: saving the same tree twice leaves the directory byte-identical.
    """

    @given(project=project_strategy())
    @settings(max_examples=25, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    def test_second_save_is_a_no_op(self, project: Project):
        store = FolderFormatStore()
        with tempfile.TemporaryDirectory() as tmp:
            location = Path(tmp) / "project"
            store.save(project, location)
            before = _snapshot(location)
            store.save(project, location)
            assert _snapshot(location) == before


class TestFolderStoreOverwrite:
    """
    Property: saving tree B over tree A yields exactly what saving B into
    an empty directory yields.
    """

    @given(first=project_strategy(), second=project_strategy())
    @settings(max_examples=25, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    def test_overwrite_matches_fresh_save(self, first: Project, second: Project):
        store = FolderFormatStore()
        with tempfile.TemporaryDirectory() as tmp:
            overwritten = Path(tmp) / "overwritten"
            fresh = Path(tmp) / "fresh"
            store.save(first, overwritten)
            store.save(second, overwritten)
            store.save(second, fresh)
            assert _snapshot(overwritten) == _snapshot(fresh)
