"""Resolve a callable's declared dependencies and invoke it with them.

A target declares its dependencies as a list under an attribute, by default
``$vaccinations``:

    >>> @vaccinations("./db", "./logger")
    ... def make_user_service(db, logger):
    ...     return UserService(db, logger)
    >>>
    >>> service = vaccinate(make_user_service, {"module_dir": "/srv/app/modules"})

Each reference is resolved by the configured loader and the results are passed
positionally, in declaration order. Dependencies are re-resolved on every call.
"""

import logging
import types
from collections.abc import Mapping
from typing import Any, Callable, Union

from vaccinate.configuration import defaults
from vaccinate.domain import Options, declared_dependencies

__all__ = ["inject", "vaccinate"]

logger = logging.getLogger(__name__)


def vaccinate(
    target: Callable,
    options: Union[None, Options, Mapping[str, Any]] = None,
    context: Any = None,
) -> Any:
    """Invoke ``target`` with its declared dependencies.

    Args:
        target: A callable carrying a list of dependency references under the
            configured dependencies property.
        options: Overrides for :data:`vaccinate.defaults`; any option not given
            is read from the defaults when the call starts. May also be a
            complete :class:`Options`.
        context: If not None, ``target`` is bound to it as its receiver and gets
            it as the first positional argument.

    Returns:
        Whatever ``target`` returns.

    Raises:
        MissingDeclarationError: If ``target`` declares no dependencies.
        ResolutionError: If a dependency cannot be loaded. Later dependencies are
            not loaded and ``target`` is not called.
        ValueError: If ``options`` names an unknown option.
    """
    return inject(target, defaults.merge(options), context)


def inject(target: Callable, options: Options, context: Any = None) -> Any:
    """Invoke ``target`` with dependencies resolved under fully merged ``options``."""
    references = declared_dependencies(target, options.dependencies_property)
    logger.debug("Resolving %d dependencies of %r", len(references), target)

    args = [options.loader.resolve(reference, options) for reference in references]

    if context is not None:
        target = types.MethodType(target, context)
    return target(*args)
