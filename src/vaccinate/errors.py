"""Exceptions raised while resolving and injecting dependencies."""

from typing import Any

__all__ = [
    "DependencyError",
    "ResolutionError",
    "MissingDeclarationError",
    "CyclicDependencyError",
]


class DependencyError(Exception):
    """Base class for every error raised by vaccinate."""

    pass


class ResolutionError(DependencyError):
    """Raised when a dependency reference cannot be loaded.

    The exception raised by the import machinery (module not found, failure
    while executing the module, missing attribute) is chained as ``__cause__``.

    Attributes:
        reference: The name that failed to load.
    """

    def __init__(self, reference: str, message: str):
        super().__init__(message)
        self.reference = reference


class MissingDeclarationError(DependencyError, TypeError):
    """Raised when a target does not declare its dependencies.

    Attributes:
        target: The object passed for injection.
        dependencies_property: The attribute the declaration was looked up under.
    """

    def __init__(self, target: Any, dependencies_property: str):
        super().__init__(
            f"{target!r} has no list of dependencies under {dependencies_property!r}"
        )
        self.target = target
        self.dependencies_property = dependencies_property


class CyclicDependencyError(DependencyError):
    """Raised when recursive injection reaches a module already being injected."""

    def __init__(self, chain: tuple[str, ...]):
        super().__init__("Cyclic dependency: " + " -> ".join(chain))
        self.chain = chain
