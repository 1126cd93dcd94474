"""Tests for schemarpc.schema — Endpoint, Route, Subtree, path derivation."""

import pytest
from pydantic import BaseModel

from schemarpc.errors import ConfigurationError
from schemarpc.schema import (
    UNVALIDATED,
    Endpoint,
    Route,
    Subtree,
    as_node,
    build_path,
    walk,
)
from schemarpc.validation import FieldRules, TypeValidator, required


class User(BaseModel):
    id: int
    name: str


class TestEndpoint:
    def test_defaults(self) -> None:
        endpoint = Endpoint()
        assert endpoint.input is UNVALIDATED
        assert endpoint.output is UNVALIDATED
        assert endpoint.is_metadata_used is True
        assert endpoint.is_metadata_required is True
        assert endpoint.cache_control is None
        assert endpoint.invalidate == ()
        assert endpoint.auto_scope_invalidation_depth == 0

    def test_plain_types_become_validators(self) -> None:
        endpoint = Endpoint(input=User, output=list[User])
        assert isinstance(endpoint.input, TypeValidator)
        assert isinstance(endpoint.output, TypeValidator)

    def test_validator_passes_through(self) -> None:
        rules = FieldRules({"name": [required]})
        assert Endpoint(input=rules).input is rules

    def test_none_means_no_payload(self) -> None:
        endpoint = Endpoint(input=None, output=None)
        assert endpoint.takes_input is False
        assert endpoint.requires_input is False
        assert endpoint.returns_output is False

    def test_unvalidated_takes_but_does_not_require_input(self) -> None:
        endpoint = Endpoint()
        assert endpoint.takes_input is True
        assert endpoint.requires_input is False

    def test_invalidate_is_tuple(self) -> None:
        assert Endpoint(invalidate=["users"]).invalidate == ("users",)

    def test_negative_depth_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            Endpoint(auto_scope_invalidation_depth=-1)

    def test_immutable(self) -> None:
        endpoint = Endpoint()
        with pytest.raises(AttributeError):
            endpoint.cache_control = "no-store"  # type: ignore[misc]


class TestRoute:
    def test_keyword_construction(self) -> None:
        route = Route(get=Endpoint(), post=Endpoint())
        assert list(route) == ["get", "post"]

    def test_verbs_lowercased(self) -> None:
        route = Route({"GET": Endpoint()})
        assert "get" in route

    def test_unknown_verb(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown verb"):
            Route({"fetch": Endpoint()})

    def test_non_endpoint_value(self) -> None:
        with pytest.raises(ConfigurationError, match="must map to an Endpoint"):
            Route(get="nope")  # type: ignore[arg-type]


class TestSubtree:
    def test_plain_dicts_convert(self) -> None:
        tree = Subtree({"users": {"get": Endpoint()}, "admin": {"logs": {"get": Endpoint()}}})
        assert isinstance(tree["users"], Route)
        assert isinstance(tree["admin"], Subtree)

    def test_own_route(self) -> None:
        tree = Subtree(get=Endpoint(), profile=Route(get=Endpoint()))
        assert tree.route is not None
        assert list(tree.route) == ["get"]
        assert list(tree) == ["profile"]

    def test_normalized_collision(self) -> None:
        with pytest.raises(ConfigurationError, match="both normalize"):
            Subtree({"userProfile": Route(get=Endpoint()), "user_profile": Route(get=Endpoint())})

    def test_empty_segment(self) -> None:
        with pytest.raises(ConfigurationError, match="empty path segment"):
            Subtree({"__": Route(get=Endpoint())})

    def test_endpoint_under_non_verb(self) -> None:
        with pytest.raises(ConfigurationError, match="non-verb key"):
            Subtree(users=Endpoint())

    def test_as_node_rejects_scalars(self) -> None:
        with pytest.raises(ConfigurationError):
            as_node(42)


class TestPaths:
    def test_build_path(self) -> None:
        assert build_path(()) == ""
        assert build_path(("users",)) == "/users"
        assert build_path(["admin", "audit-log"]) == "/admin/audit-log"

    def test_walk_order_and_paths(self) -> None:
        schema = Subtree(
            {
                "users": Route(get=Endpoint(), post=Endpoint()),
                "adminTools": {"auditLog": Route(delete=Endpoint())},
            }
        )
        sites = [(site.method, site.path, site.keys) for site in walk(schema)]
        assert sites == [
            ("get", "/users", ("users",)),
            ("post", "/users", ("users",)),
            ("delete", "/admin-tools/audit-log", ("adminTools", "auditLog")),
        ]

    def test_root_route_has_empty_path(self) -> None:
        sites = list(walk(Route(get=Endpoint())))
        assert [(s.method, s.path) for s in sites] == [("get", "")]

    def test_own_route_before_children(self) -> None:
        schema = Subtree(users=Subtree(get=Endpoint(), profile=Route(get=Endpoint())))
        assert [s.path for s in walk(schema)] == ["/users", "/users/profile"]
