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

"""Tests for BaseRouter resolution: dispatch, fallthrough and continuation."""

import pytest

from tree_routes import SKIP_BRANCH, BaseRouter, InvalidRoutes, NotFound, Produced, Route
from tree_routes.core.patterns import PatternCache


def returns(value, calls=None, label=None):
    def action(context, params):
        if calls is not None:
            calls.append(label)
        return value

    return action


def echo_params(context, params):
    return params


@pytest.fixture
def users_router():
    return BaseRouter(Route("/users", children=[Route("/:id", echo_params)]))


class TestScenarios:
    def test_nested_param_is_resolved(self, users_router):
        assert users_router.resolve("/users/42") == {"id": "42"}

    def test_unmatched_path_raises_not_found(self, users_router):
        with pytest.raises(NotFound) as excinfo:
            users_router.resolve("/nothing")
        assert excinfo.value.status == 404
        assert excinfo.value.pathname == "/nothing"
        assert str(excinfo.value) == "Route not found"

    def test_root_without_result_falls_through_to_child(self):
        router = BaseRouter(Route("", returns(None), children=[Route("/a", returns("A"))]))
        assert router.resolve("/a") == "A"

    def test_base_url_is_stripped_and_reported(self):
        def action(context, params):
            return params, context.path, context.base_url

        router = BaseRouter(Route("/:id", action), base_url="/app")
        assert router.resolve("/app/7") == ({"id": "7"}, "/7", "/app")

    def test_pathname_outside_base_url_is_not_found(self):
        router = BaseRouter(Route("/:id", echo_params), base_url="/app")
        with pytest.raises(NotFound):
            router.resolve("/other/7")


class TestDispatchOrder:
    def test_parent_result_wins_over_child(self):
        calls = []
        router = BaseRouter(
            Route("/a", returns("parent", calls, "a"), children=[Route("/b", returns("child", calls, "b"))])
        )
        assert router.resolve("/a/b") == "parent"
        assert calls == ["a"]

    def test_fallthrough_visits_children_then_next_sibling(self):
        calls = []
        router = BaseRouter(
            [
                Route("/a", returns(None, calls, "a"), children=[Route("/b", returns(None, calls, "b"))]),
                Route("/a/b", returns("sibling", calls, "sibling")),
            ]
        )
        assert router.resolve("/a/b") == "sibling"
        assert calls == ["a", "b", "sibling"]

    def test_first_matching_child_in_declared_order(self):
        router = BaseRouter(
            Route("/a", children=[Route("/:x", returns("param")), Route("/b", returns("literal"))])
        )
        assert router.resolve("/a/b") == "param"

    def test_skip_branch_prunes_children(self):
        calls = []
        router = BaseRouter(
            [
                Route("/a", returns(SKIP_BRANCH, calls, "a"), children=[Route("/b", returns("b", calls, "b"))]),
                Route("/a/b", returns("sibling", calls, "sibling")),
            ]
        )
        assert router.resolve("/a/b") == "sibling"
        assert calls == ["a", "sibling"]

    def test_produced_none_is_a_result(self):
        router = BaseRouter([Route("/a", returns(Produced(None))), Route("/a", returns("late"))])
        assert router.resolve("/a") is None

    def test_falsy_values_are_results(self):
        router = BaseRouter([Route("/a", returns(0)), Route("/a", returns("late"))])
        assert router.resolve("/a") == 0

    def test_all_candidates_fall_through(self):
        router = BaseRouter([Route("/a", returns(None)), Route("/a", returns(None))])
        with pytest.raises(NotFound):
            router.resolve("/a")

    def test_long_fallthrough_chain(self):
        routes = [Route("/a", returns(None)) for _ in range(3000)]
        routes.append(Route("/a", returns("last")))
        assert BaseRouter(routes).resolve("/a") == "last"


class TestParams:
    def test_child_inherits_parent_params(self):
        router = BaseRouter(Route("/:id", children=[Route("/edit", echo_params)]))
        assert router.resolve("/5/edit") == {"id": "5"}

    def test_child_optional_capture_keeps_parent_value(self):
        router = BaseRouter(Route("/:id", children=[Route("/:id?", echo_params)]))
        assert router.resolve("/5") == {"id": "5"}

    def test_repeat_capture(self):
        router = BaseRouter(Route("/files/:path*", lambda context, params: params["path"]))
        assert router.resolve("/files/a/b/c") == ["a", "b", "c"]

    def test_context_keys_accumulate(self):
        def action(context, params):
            return [key.name for key in context["keys"]]

        router = BaseRouter(Route("/:org", children=[Route("/:repo", action)]))
        assert router.resolve("/acme/tools") == ["org", "repo"]


class TestContinuation:
    def test_next_resolves_child_within_scope(self):
        def layout(context, params):
            return f"<admin>{context.next()}</admin>"

        router = BaseRouter(Route("/admin", layout, children=[Route("/users", returns("users"))]))
        assert router.resolve("/admin/users") == "<admin>users</admin>"

    def test_next_returns_none_when_no_child_matches(self):
        def layout(context, params):
            inner = context.next()
            return "layout-only" if inner is None else inner

        router = BaseRouter(Route("/admin", layout, children=[Route("/x", returns("x"))]))
        assert router.resolve("/admin") == "layout-only"

    def test_out_of_scope_candidate_is_kept_for_the_walk(self):
        seen = []

        def first(context, params):
            seen.append(context.next())
            return None

        router = BaseRouter([Route("/admin", first), Route("/admin", returns("second"))])
        assert router.resolve("/admin") == "second"
        assert seen == [None]

    def test_explicit_parent_widens_scope(self):
        def first(context, params):
            return ("wrapped", context.next(False, context.router.root))

        router = BaseRouter([Route("/docs", first), Route("/docs", returns("second"))])
        assert router.resolve("/docs") == ("wrapped", "second")

    def test_explicit_parent_is_not_its_own_descendant(self):
        section = Route("/docs", children=[Route("/intro", returns("intro"))])

        def wrapper(context, params):
            return ("wrapped", context.next(False, section))

        router = BaseRouter([Route("", wrapper, children=[section])])
        assert router.resolve("/docs/intro") == ("wrapped", None)

    def test_resume_continues_past_scope(self):
        def first(context, params):
            return f"first+{context.next(True)}"

        router = BaseRouter([Route("/a", first), Route("/a", returns("second"))])
        assert router.resolve("/a") == "first+second"

    def test_resume_raises_not_found_when_exhausted(self):
        router = BaseRouter([Route("/a", lambda context, params: context.next(True))])
        with pytest.raises(NotFound):
            router.resolve("/a")


class TestContext:
    def test_base_context_and_router(self):
        def action(context, params):
            return context.user, context.router, context.pathname

        router = BaseRouter(Route("/x", action), context={"user": "alice"})
        assert router.resolve("/x") == ("alice", router, "/x")

    def test_partial_context_mapping(self):
        router = BaseRouter(Route("/x", lambda context, params: context.user), context={"user": "alice"})
        assert router.resolve({"pathname": "/x", "user": "bob"}) == "bob"
        assert router.resolve("/x", user="carol") == "carol"

    def test_missing_attribute_raises_attribute_error(self):
        def action(context, params):
            return context.missing

        with pytest.raises(AttributeError):
            BaseRouter(Route("/x", action)).resolve("/x")

    def test_resolve_requires_pathname(self):
        router = BaseRouter(Route("/x", echo_params))
        with pytest.raises(TypeError):
            router.resolve(42)
        with pytest.raises(TypeError):
            router.resolve({"user": "bob"})


class TestHooksAndErrors:
    def test_custom_resolve_route(self):
        def resolve_route(context, params):
            return context.route.name

        router = BaseRouter([Route("/a"), Route("/a", name="named")], resolve_route=resolve_route)
        assert router.resolve("/a") == "named"

    def test_error_handler_receives_not_found(self):
        router = BaseRouter(Route("/x", echo_params), error_handler=lambda error, context: type(error).__name__)
        assert router.resolve("/missing") == "NotFound"

    def test_error_handler_receives_last_context(self):
        def boom(context, params):
            raise ValueError("boom")

        def on_error(error, context):
            return str(error), context.path, context.params

        router = BaseRouter(Route("/boom/:id", boom), error_handler=on_error)
        assert router.resolve("/boom/1") == ("boom", "/boom/1", {"id": "1"})

    def test_handler_errors_propagate_without_handler(self):
        def boom(context, params):
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            BaseRouter(Route("/boom", boom)).resolve("/boom")


class TestConstruction:
    @pytest.mark.parametrize("routes", [None, "routes", 42])
    def test_invalid_routes(self, routes):
        with pytest.raises(InvalidRoutes):
            BaseRouter(routes)

    def test_invalid_routes_is_type_error(self):
        with pytest.raises(TypeError):
            BaseRouter(None)

    def test_non_callable_action(self):
        with pytest.raises(InvalidRoutes):
            Route("/x", "not callable")

    def test_mapping_routes(self):
        router = BaseRouter(
            [{"path": "/users", "children": [{"path": "/:id", "action": echo_params, "meta_title": "User"}]}]
        )
        assert router.resolve("/users/3") == {"id": "3"}
        assert router.tree.routes[2].metadata == {"title": "User"}

    def test_sequence_is_wrapped_in_synthetic_root(self):
        router = BaseRouter([Route("/a", returns("a"))])
        assert router.root.path == ""
        assert router.root.children[0].path == "/a"


class TestIntrospection:
    def test_matches_lists_candidates_without_invoking(self):
        calls = []
        router = BaseRouter(Route("/users", returns("x", calls, "u"), children=[Route("/:id")]))
        assert [c.path for c in router.matches("/users/9")] == ["/users", "/9"]
        assert calls == []

    def test_matches_outside_base_url_is_empty(self):
        router = BaseRouter(Route("/:id"), base_url="/app")
        assert list(router.matches("/other")) == []

    def test_nodes(self):
        router = BaseRouter(Route("/users", children=[Route("/:id", echo_params, name="user", meta_title="User")]))
        assert router.nodes() == {
            "path": "/users",
            "key": "/users",
            "name": None,
            "metadata": {},
            "has_action": False,
            "children": [
                {"path": "/:id", "key": "user", "name": "user", "metadata": {"title": "User"}, "has_action": True},
            ],
        }


class TestPatternCacheUsage:
    def test_repeated_resolution_does_not_grow_cache(self):
        cache = PatternCache()
        router = BaseRouter(
            [Route("/users", children=[Route("/:id", echo_params)])], pattern_cache=cache
        )
        for _ in range(3):
            router.resolve("/users/42")
        assert len(cache) == 3
        assert ("", False) in cache
        assert ("/users", False) in cache
        assert ("/:id", True) in cache
