from __future__ import annotations

from dataclasses import dataclass

from ..errors import LocatorFragmentRejected

# Checked in order; first match wins.
REF_PREFIXES = ("ref=", "h=", "branch=", "tag=")


@dataclass(frozen=True)
class LocatorParts:
    resource: str
    query: str = ""
    fragment: str = ""

    @property
    def ref(self) -> str:
        return derive_ref(self.query)


def split_locator(locator: str) -> LocatorParts:
    """Split a repository locator into resource, query and fragment.

    Only the first '#' and the first '?' before it are significant, so
    ``https://host/repo?tag=1.0#x#y`` gives query ``tag=1.0`` and fragment
    ``x#y``.
    """

    sans_fragment = locator.split("#", 1)[0]
    sans_query = sans_fragment.split("?", 1)[0]

    fragment = ""
    if sans_fragment != locator:
        fragment = locator[len(sans_fragment) + 1 :]

    query = ""
    if sans_query != sans_fragment:
        query = sans_fragment[len(sans_query) + 1 :]

    return LocatorParts(resource=sans_query, query=query, fragment=fragment)


def derive_ref(query: str) -> str:
    """Checkout reference encoded in a locator query.

    ``ref=``, ``h=``, ``branch=`` and ``tag=`` are accepted; anything else is
    taken as a bare ref name. Empty means the remote's default branch.
    """

    for prefix in REF_PREFIXES:
        if query.startswith(prefix):
            return query[len(prefix) :]
    return query


def require_no_fragment(parts: LocatorParts) -> LocatorParts:
    if parts.fragment:
        raise LocatorFragmentRejected(
            f"Locator fragments ('#{parts.fragment}') are not supported; "
            f"select what to check out with a query instead, e.g. {parts.resource}?ref={parts.fragment}"
        )
    return parts


def resource_name(resource: str) -> str:
    """Project name implied by a repository resource (``.../mesos.git`` -> ``mesos``)."""

    tail = resource.rstrip("/").rsplit("/", 1)[-1].rsplit(":", 1)[-1]
    return tail[: -len(".git")] if tail.endswith(".git") else tail
