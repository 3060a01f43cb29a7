"""
Unit and property tests for path segment naming.

Tests cover:
- sanitize: mapping display names to filesystem-safe segments
- allocate_segments: collision handling inside one container
"""

import re

from hypothesis import given, settings
from hypothesis import strategies as st

from api_workbench.services.naming import allocate_segments, sanitize


SAFE_SEGMENT = re.compile(r"^[A-Za-z0-9_\-]+$")

name_strategy = st.text(
    alphabet=st.sampled_from("abcABC012 _-./:?é"),
    min_size=0,
    max_size=12,
)


class TestSanitize:
    """Tests for sanitize."""

    def test_spaces_become_underscores(self):
        assert sanitize("Get User") == "Get_User"

    def test_path_separators_are_replaced(self):
        assert sanitize("a/b\\c.d") == "a_b_c_d"

    def test_safe_names_are_unchanged(self):
        assert sanitize("Login-Flow_2") == "Login-Flow_2"

    def test_non_ascii_letters_are_replaced(self):
        assert sanitize("Café") == "Caf_"

    def test_empty_name_gives_placeholder(self):
        assert sanitize("") == "_"

    def test_not_injective(self):
        assert sanitize("Get User") == sanitize("Get_User")

    @given(name=name_strategy)
    @settings(max_examples=100)
    def test_output_is_always_safe(self, name: str):
        assert SAFE_SEGMENT.match(sanitize(name))

    @given(name=name_strategy)
    @settings(max_examples=100)
    def test_deterministic(self, name: str):
        assert sanitize(name) == sanitize(name)


class TestAllocateSegments:
    """Tests for allocate_segments."""

    def test_distinct_names_keep_their_segments(self):
        assert allocate_segments(["Login", "Logout"]) == ["Login", "Logout"]

    def test_colliding_names_get_suffixes_in_order(self):
        assert allocate_segments(["Get User", "Get_User", "Get?User"]) == [
            "Get_User",
            "Get_User_2",
            "Get_User_3",
        ]

    def test_collisions_are_case_insensitive(self):
        assert allocate_segments(["abc", "ABC"]) == ["abc", "ABC_2"]

    def test_reserved_names_are_never_assigned(self):
        assert allocate_segments(["operation", "Other"], reserved=("operation",)) == [
            "operation_2",
            "Other",
        ]

    def test_suffix_skips_segments_already_taken(self):
        assert allocate_segments(["a", "a_2", "a"]) == ["a", "a_2", "a_3"]

    @given(names=st.lists(name_strategy, max_size=10))
    @settings(max_examples=100)
    def test_segments_are_unique_ignoring_case(self, names: list[str]):
        segments = allocate_segments(names, reserved=("folder",))
        assert len(segments) == len(names)
        folded = [segment.casefold() for segment in segments]
        assert len(set(folded)) == len(folded)
        assert "folder" not in folded
        for segment in segments:
            assert SAFE_SEGMENT.match(segment)
