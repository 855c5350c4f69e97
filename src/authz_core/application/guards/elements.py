"""Application guards – the element tree guards render into.

Guards are renderer-agnostic: they return plain :class:`Element` values
(or strings) that a UI layer maps onto its own widgets.
"""
from __future__ import annotations

import dataclasses
from typing import Any, Iterable, Mapping

from authz_core.kernel.security import AccessDecision

ACCESS_DENIED = "access-denied"
LOADING = "loading"
REDIRECT = "redirect"
LOCK_INDICATOR = "lock-indicator"

DEFAULT_DENIED_MESSAGE = "You don't have permission to access this resource."


@dataclasses.dataclass(frozen=True)
class Element:
    type: str
    props: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    children: tuple["Node", ...] = ()

    def with_props(self, **props: Any) -> "Element":
        """Return a copy with *props* merged over the existing ones."""
        return dataclasses.replace(self, props={**self.props, **props})


type Node = Element | str
type Children = Node | Iterable[Node] | None


def as_children(children: Children) -> tuple[Node, ...]:
    if children is None:
        return ()
    if isinstance(children, (Element, str)):
        return (children,)
    return tuple(children)


def access_denied(decision: AccessDecision | None = None, message: str | None = None) -> Element:
    """Placeholder naming the missing ``module:action`` when there is one."""
    props: dict[str, Any] = {"message": message or DEFAULT_DENIED_MESSAGE}
    if decision is not None:
        props["permission"] = decision.token
        if message is None and decision.reason is not None:
            props["message"] = decision.reason
    return Element(ACCESS_DENIED, props)


def loading() -> Element:
    return Element(LOADING)


def redirect(to: str, replace: bool = True) -> Element:
    return Element(REDIRECT, {"to": to, "replace": replace})


def lock_indicator() -> Element:
    return Element(LOCK_INDICATOR)


__all__ = [
    "ACCESS_DENIED",
    "Children",
    "DEFAULT_DENIED_MESSAGE",
    "Element",
    "LOADING",
    "LOCK_INDICATOR",
    "Node",
    "REDIRECT",
    "access_denied",
    "as_children",
    "loading",
    "lock_indicator",
    "redirect",
]
