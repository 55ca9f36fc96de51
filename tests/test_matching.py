# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for match_path: param extraction, merge rule and decoding."""

import pytest

from tree_routes import Route
from tree_routes.core.matching import decode_param, match_path
from tree_routes.core.patterns import PatternCache


@pytest.fixture
def cache():
    return PatternCache()


class TestMatchPath:
    def test_terminal_match_extracts_params(self, cache):
        result = match_path(Route("/users/:id"), "/users/42", cache=cache)
        assert result.path == "/users/42"
        assert result.params == {"id": "42"}
        assert [key.name for key in result.keys] == ["id"]

    def test_no_match_returns_none(self, cache):
        assert match_path(Route("/users/:id"), "/teams/1", cache=cache) is None

    def test_leaf_routes_use_terminal_mode(self, cache):
        assert match_path(Route("/users"), "/users/42", cache=cache) is None

    def test_routes_with_children_use_prefix_mode(self, cache):
        route = Route("/users", children=[Route("/:id")])
        result = match_path(route, "/users/42", cache=cache)
        assert result.path == "/users"
        assert ("/users", False) in cache

    def test_prefix_trailing_slash_is_stripped(self, cache):
        route = Route("/users", children=[Route("/")])
        result = match_path(route, "/users/", cache=cache)
        assert result.path == "/users"

    def test_keys_are_parent_keys_then_own(self, cache):
        parent = match_path(Route("/:org", children=[Route("/:repo")]), "/acme/tools", cache=cache)
        child = match_path(Route("/:repo"), "/tools", parent.keys, parent.params, cache=cache)
        assert [key.name for key in child.keys] == ["org", "repo"]
        assert child.params == {"org": "acme", "repo": "tools"}

    def test_parent_params_are_not_mutated(self, cache):
        inherited = {"org": "acme"}
        match_path(Route("/:repo"), "/tools", (), inherited, cache=cache)
        assert inherited == {"org": "acme"}


class TestParamMerge:
    """A child capture overrides inherited values only when defined."""

    def test_undefined_capture_keeps_inherited_value(self, cache):
        result = match_path(Route("/:id?"), "", (), {"id": "5"}, cache=cache)
        assert result.params == {"id": "5"}

    def test_defined_capture_overrides_inherited_value(self, cache):
        result = match_path(Route("/:id"), "/6", (), {"id": "5"}, cache=cache)
        assert result.params == {"id": "6"}

    def test_undefined_capture_for_new_name_is_recorded(self, cache):
        result = match_path(Route("/:id?"), "", cache=cache)
        assert result.params == {"id": None}


class TestRepeatAndDecode:
    def test_repeat_capture_is_split_on_delimiter(self, cache):
        result = match_path(Route("/:path+"), "/a/b/c", cache=cache)
        assert result.params == {"path": ["a", "b", "c"]}

    def test_repeat_pieces_are_decoded_independently(self, cache):
        result = match_path(Route("/:path+"), "/a%20b/c%2Fd", cache=cache)
        assert result.params == {"path": ["a b", "c/d"]}

    def test_missing_repeat_capture_is_empty_list(self, cache):
        result = match_path(Route("/files/:path*"), "/files", cache=cache)
        assert result.params == {"path": []}

    def test_single_capture_is_decoded(self, cache):
        result = match_path(Route("/:name"), "/caf%C3%A9", cache=cache)
        assert result.params == {"name": "café"}

    def test_decode_failure_keeps_raw_text(self):
        assert decode_param("%E0%A4%A") == "%E0%A4%A"

    def test_malformed_escape_is_left_alone(self):
        assert decode_param("%ZZ") == "%ZZ"
