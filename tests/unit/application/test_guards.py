"""Unit tests for the Subtree, Field, Row and Route guards."""

from __future__ import annotations

import asyncio
import dataclasses
from unittest.mock import patch

from authz_core.application.guards import (
    ACCESS_DENIED,
    DEFAULT_DENIED_MESSAGE,
    LOADING,
    LOCK_INDICATOR,
    REDIRECT,
    Element,
    FieldGuard,
    RouteGuard,
    RowGuard,
    SubtreeGuard,
    access_denied,
    as_children,
    redirect,
)
from authz_core.application.query import PermissionQuery
from authz_core.application.session import Credentials, IdentitySession, UserRecord
from authz_core.kernel.security import ModulePermission
from authz_core.testing.fakes import InMemoryIdentityDirectory


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _user(role: str = "agent", branch: str | None = "north", **modules: tuple[str, ...]) -> UserRecord:
    return UserRecord(
        user_id="u1",
        role=role,
        branch=branch,
        permissions=tuple(ModulePermission(m, frozenset(a)) for m, a in modules.items()),
    )


def _query(user: UserRecord | None) -> PermissionQuery:
    directory = InMemoryIdentityDirectory()
    session = IdentitySession(directory)
    if user is not None:
        directory.add_user("user@example.com", "pw", user)
        asyncio.run(session.login(Credentials("user@example.com", "pw")))
    return PermissionQuery(session)


AGENT = _user(clients=("view", "create", "edit"), leads=("view",))
ADMIN = _user(role="admin", branch=None, clients=("view", "edit", "edit_sensitive"))
SUPER = _user(role="super_admin", branch=None)

SECRET = Element("button", {"label": "Delete"})


@dataclasses.dataclass
class _Row:
    name: str
    branch: str | None


# ---------------------------------------------------------------------------
# Elements
# ---------------------------------------------------------------------------


class TestElements:
    def test_as_children(self) -> None:
        assert as_children(None) == ()
        assert as_children("text") == ("text",)
        assert as_children(SECRET) == (SECRET,)
        assert as_children([SECRET, "x"]) == (SECRET, "x")

    def test_with_props_merges(self) -> None:
        merged = SECRET.with_props(disabled=True)
        assert merged.props == {"label": "Delete", "disabled": True}
        assert SECRET.props == {"label": "Delete"}

    def test_access_denied_default_message(self) -> None:
        element = access_denied()
        assert element.type == ACCESS_DENIED
        assert element.props == {"message": DEFAULT_DENIED_MESSAGE}

    def test_redirect_replaces_history(self) -> None:
        assert redirect("/auth").props == {"to": "/auth", "replace": True}


# ---------------------------------------------------------------------------
# SubtreeGuard
# ---------------------------------------------------------------------------


class TestSubtreeGuard:
    def test_allowed_renders_children(self) -> None:
        guard = SubtreeGuard(_query(AGENT), "clients", "edit")
        assert guard.allowed
        assert guard.render([SECRET]) == (SECRET,)

    def test_denied_renders_placeholder_naming_permission(self) -> None:
        guard = SubtreeGuard(_query(AGENT), "clients", "delete")
        (node,) = guard.render(SECRET)
        assert isinstance(node, Element)
        assert node.type == ACCESS_DENIED
        assert node.props["permission"] == "clients:delete"
        assert "clients:delete" in node.props["message"]

    def test_fallback_none_renders_nothing(self) -> None:
        guard = SubtreeGuard(_query(AGENT), "clients", "delete", fallback=None)
        assert guard.render(SECRET) == ()

    def test_custom_fallback(self) -> None:
        guard = SubtreeGuard(_query(AGENT), "clients", "delete", fallback="read only")
        assert guard.render(SECRET) == ("read only",)

    def test_other_branch_denied(self) -> None:
        query = _query(AGENT)
        assert SubtreeGuard(query, "clients", "view", record_branch="north").allowed
        assert not SubtreeGuard(query, "clients", "view", record_branch="south").allowed
        assert SubtreeGuard(query, "clients", "view", record_branch="all").allowed

    def test_branch_check_off(self) -> None:
        guard = SubtreeGuard(_query(AGENT), "clients", "view", record_branch="south", branch_check=False)
        assert guard.allowed

    def test_untagged_record_not_branch_checked(self) -> None:
        assert SubtreeGuard(_query(AGENT), "clients", "view").allowed

    def test_signed_out_denied(self) -> None:
        assert not SubtreeGuard(_query(None), "clients", "view").allowed

    def test_super_admin_sees_everything(self) -> None:
        guard = SubtreeGuard(_query(SUPER), "settings", "delete", record_branch="south")
        assert guard.render(SECRET) == (SECRET,)


# ---------------------------------------------------------------------------
# FieldGuard
# ---------------------------------------------------------------------------


class TestFieldGuard:
    def test_editable_field_untouched(self) -> None:
        field = Element("input", {"name": "phone"})
        guard = FieldGuard(_query(AGENT), "clients")
        assert guard.editable
        assert guard.render(field) == (field,)

    def test_read_only_wrapper_with_lock(self) -> None:
        field = Element("input", {"name": "phone"})
        guard = FieldGuard(_query(AGENT), "leads")
        (wrapper,) = guard.render(field)
        assert isinstance(wrapper, Element)
        assert wrapper.props["read_only"] is True
        locked, lock = wrapper.children
        assert isinstance(locked, Element)
        assert locked.props == {"name": "phone", "read_only": True, "disabled": True}
        assert isinstance(lock, Element) and lock.type == LOCK_INDICATOR

    def test_lock_can_be_hidden(self) -> None:
        guard = FieldGuard(_query(AGENT), "leads", show_lock=False)
        (wrapper,) = guard.render([Element("input"), "label"])
        assert isinstance(wrapper, Element)
        assert len(wrapper.children) == 2
        assert wrapper.children[1] == "label"

    def test_sensitive_requires_edit_sensitive(self) -> None:
        assert not FieldGuard(_query(AGENT), "clients", sensitive=True).editable
        assert FieldGuard(_query(ADMIN), "clients", sensitive=True).editable

    def test_sensitive_decision_names_missing_token(self) -> None:
        decision = FieldGuard(_query(AGENT), "clients", sensitive=True).decision
        assert decision.missing_permission == "clients:edit_sensitive"

    def test_field_ignores_branch(self) -> None:
        assert FieldGuard(_query(_user(branch=None, clients=("edit",))), "clients").editable


# ---------------------------------------------------------------------------
# RowGuard
# ---------------------------------------------------------------------------


class TestRowGuard:
    def test_same_branch_row_rendered(self) -> None:
        row = Element("tr")
        assert RowGuard(_query(AGENT), "clients", "north").render(row) == (row,)

    def test_other_branch_row_hidden(self) -> None:
        assert RowGuard(_query(AGENT), "clients", "south").render(Element("tr")) == ()

    def test_untagged_row_hidden(self) -> None:
        assert not RowGuard(_query(AGENT), "clients", None).allowed

    def test_untagged_row_visible_without_branch_check(self) -> None:
        assert RowGuard(_query(AGENT), "clients", None, branch_check=False).allowed

    def test_no_view_permission(self) -> None:
        assert not RowGuard(_query(AGENT), "invoices", "north").allowed

    def test_filter_mappings_and_objects(self) -> None:
        guard = RowGuard(_query(AGENT), "clients")
        dicts = [{"id": 1, "branch": "north"}, {"id": 2, "branch": "south"}, {"id": 3}, {"id": 4, "branch": "all"}]
        assert [r["id"] for r in guard.filter(dicts)] == [1, 4]
        objects = [_Row("a", "north"), _Row("b", "south"), _Row("c", None)]
        assert [r.name for r in guard.filter(objects)] == ["a"]

    def test_filter_with_accessor(self) -> None:
        guard = RowGuard(_query(AGENT), "clients")
        rows = [("x", "north"), ("y", "south")]
        assert guard.filter(rows, branch_of=lambda r: r[1]) == [("x", "north")]

    def test_super_admin_sees_all_rows(self) -> None:
        guard = RowGuard(_query(SUPER), "clients")
        rows = [{"branch": "north"}, {"branch": "south"}, {}]
        assert guard.filter(rows) == rows


# ---------------------------------------------------------------------------
# RouteGuard
# ---------------------------------------------------------------------------


class TestRouteGuard:
    def test_signed_out_redirects_to_sign_in(self) -> None:
        (node,) = RouteGuard(_query(None), "clients", "view").render(SECRET)
        assert isinstance(node, Element)
        assert node.type == REDIRECT
        assert node.props == {"to": "/auth", "replace": True}

    def test_custom_sign_in_path(self) -> None:
        (node,) = RouteGuard(_query(None), sign_in_path="/login").render(SECRET)
        assert isinstance(node, Element) and node.props["to"] == "/login"

    def test_authentication_only(self) -> None:
        assert RouteGuard(_query(AGENT)).render(SECRET) == (SECRET,)

    def test_allowed(self) -> None:
        assert RouteGuard(_query(AGENT), "clients", "view").render(SECRET) == (SECRET,)

    def test_denied_placeholder(self) -> None:
        (node,) = RouteGuard(_query(AGENT), "settings", "edit").render(SECRET)
        assert isinstance(node, Element)
        assert node.type == ACCESS_DENIED
        assert node.props["permission"] == "settings:edit"

    def test_denied_redirect(self) -> None:
        (node,) = RouteGuard(_query(AGENT), "settings", "edit", redirect_to="/dashboard").render(SECRET)
        assert isinstance(node, Element)
        assert node.type == REDIRECT
        assert node.props["to"] == "/dashboard"

    def test_predicate_failure_is_denial(self) -> None:
        query = _query(AGENT)
        guard = RouteGuard(query, "clients", "view")
        with patch.object(PermissionQuery, "evaluate", side_effect=RuntimeError("boom")):
            assert not guard.allowed
            (node,) = guard.render(SECRET)
        assert isinstance(node, Element) and node.type == ACCESS_DENIED

    def test_loading_while_resolving(self) -> None:
        async def run() -> None:
            directory = InMemoryIdentityDirectory()
            directory.add_user("user@example.com", "pw", AGENT)
            session = IdentitySession(directory)
            guard = RouteGuard(PermissionQuery(session), "clients", "view")
            directory.hold()
            login = asyncio.create_task(session.login(Credentials("user@example.com", "pw")))
            while directory.fetch_calls == 0:
                await asyncio.sleep(0)
            (node,) = guard.render(SECRET)
            assert isinstance(node, Element) and node.type == LOADING
            directory.release()
            await login
            assert guard.render(SECRET) == (SECRET,)

        asyncio.run(run())
