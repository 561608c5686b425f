"""
Domain: a named group of resources with interface definitions of its own.

A domain exposes entry points declared at the domain level against one of its
resources, alongside (not instead of) the resources' own entry points.

Examples:
    >>> from resact import Domain, define  # doctest: +SKIP
    >>> accounts = Domain("accounts", [users], interfaces={"user": [define("get_user", action="read", get_by=["id"])]})  # doctest: +SKIP
    >>> accounts.get_user(user_id)  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from resact.core.errors import SchemaError
from resact.core.grammar import is_lower_snake
from resact.core.schema import InterfaceDefinition

from .interface.generator import CodeInterface
from .resource import Resource

__all__ = ["Domain"]

logger = logging.getLogger(__name__)


class Domain:
    """
    Group of resources plus domain-level entry points.

    Args:
        name (str): lower_snake domain name.
        resources (Iterable[Resource]): Member resources, unique by name.
        interfaces (Mapping[str, Iterable[InterfaceDefinition]] | None): Definitions per
            resource name. Each one is validated against its resource's schema.

    Raises:
        SchemaError: Unknown or duplicate resource names, definitions that do not
            resolve, or two definitions generating the same entry point name.
    """

    def __init__(
        self,
        name: str,
        resources: Iterable[Resource],
        *,
        interfaces: Mapping[str, Iterable[InterfaceDefinition]] | None = None,
    ) -> None:
        if not is_lower_snake(name):
            raise SchemaError(f"domain name must be lower_snake (got: {name!r})")
        self.name = name
        self._resources: dict[str, Resource] = {}
        for resource in resources:
            if resource.name in self._resources:
                raise SchemaError(f"domain {name!r} lists resource {resource.name!r} twice")
            self._resources[resource.name] = resource

        entries: dict[str, Callable[..., Any]] = {}
        for resource_name, definitions in (interfaces or {}).items():
            resource = self._resources.get(resource_name)
            if resource is None:
                raise SchemaError(f"domain {name!r} has no resource {resource_name!r}")
            definitions = list(definitions)
            for definition in definitions:
                resource.schema.validate_interface(definition)
            interface = CodeInterface(resource, definitions)
            for entry in interface:
                if entry in entries:
                    raise SchemaError(f"domain {name!r} generates entry point {entry!r} twice")
                entries[entry] = interface[entry]
        reserved = set(dir(type(self))) | {"name", "_resources", "_entries"}
        clashes = sorted(entry for entry in entries if entry in reserved)
        if clashes:
            raise SchemaError(f"entry points {clashes} shadow attributes of Domain")
        self._entries = entries
        logger.debug("domain %s: %d entry points", name, len(entries))

    def __getattr__(self, name: str) -> Callable[..., Any]:
        entries = self.__dict__.get("_entries", {})
        try:
            return entries[name]
        except KeyError:
            raise AttributeError(f"domain has no entry point named {name!r}") from None

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._entries))

    def __iter__(self) -> Iterator[Resource]:
        return iter(self._resources.values())

    def __repr__(self) -> str:
        return f"Domain({self.name!r}, resources={sorted(self._resources)})"

    def resource(self, name: str) -> Resource:
        try:
            return self._resources[name]
        except KeyError:
            raise SchemaError(f"domain {self.name!r} has no resource {name!r}") from None

    def entry_points(self) -> list[str]:
        return list(self._entries)
