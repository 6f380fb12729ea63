"""Domain models shared by the injector and its loaders."""

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence, Union

from vaccinate.errors import MissingDeclarationError

if TYPE_CHECKING:
    from vaccinate.loaders import Loader

__all__ = [
    "DEFAULT_DEPENDENCIES_PROPERTY",
    "DependencyReference",
    "ModuleDir",
    "Options",
    "declared_dependencies",
    "is_declaring_target",
    "vaccinations",
]

DEFAULT_DEPENDENCIES_PROPERTY = "$vaccinations"

DependencyReference = Any
"""Type alias for an entry in a dependency declaration.

A ``str`` is a name to be loaded; anything else is handed to the target as-is.

Example:
    >>> make_service.__dict__["$vaccinations"] = ["./db", "json:dumps", fake_clock]
"""

ModuleDir = Union[None, str, os.PathLike, Sequence[Union[str, os.PathLike]]]


@dataclass(frozen=True)
class Options:
    """The settings used for a single injection.

    Attributes:
        dependencies_property: Name of the attribute holding a target's declaration.
        module_dir: Base directory (or dotted package) used to resolve names starting
            with ``./``. Paths may be ``os.PathLike``. A sequence of bases is searched
            in order. None or an empty string disables prefixing.
        loader: Strategy turning one dependency reference into a value.
        resolving: Keys of the modules whose exports are being injected further up
            the call chain.
    """

    dependencies_property: str
    module_dir: ModuleDir
    loader: "Loader"
    resolving: tuple[str, ...] = ()


def _is_declaration(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_declaring_target(value: Any, dependencies_property: str) -> bool:
    """Check whether ``value`` can be injected.

    A declaring target is callable and carries a list or tuple of dependency
    references under ``dependencies_property``.

    Example:
        >>> @vaccinations("json")
        ... def make_encoder(json): ...
        >>> is_declaring_target(make_encoder, "$vaccinations")  # True
        >>> is_declaring_target(make_encoder, "inject")         # False
    """
    return callable(value) and _is_declaration(
        getattr(value, dependencies_property, None)
    )


def declared_dependencies(
    target: Any, dependencies_property: str
) -> Sequence[DependencyReference]:
    """Return the dependency references declared on ``target``.

    Raises:
        MissingDeclarationError: If ``target`` carries no list or tuple under
            ``dependencies_property``.
    """
    declaration = getattr(target, dependencies_property, None)
    if not _is_declaration(declaration):
        raise MissingDeclarationError(target, dependencies_property)
    return declaration


def vaccinations(
    *references: DependencyReference, property_name: Optional[str] = None
) -> Callable:
    """Decorator declaring the dependencies of a function or class.

    Args:
        references: Dependency references, in the order the target's parameters
            expect them.
        property_name: Attribute to store the declaration under; defaults to
            ``"$vaccinations"``.

    Example:
        @vaccinations("./db", "./logger")
        def make_user_service(db, logger):
            return UserService(db, logger)
    """

    def decorator(target: Callable) -> Callable:
        setattr(target, property_name or DEFAULT_DEPENDENCIES_PROPERTY, list(references))
        return target

    return decorator
