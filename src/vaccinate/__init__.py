"""Minimal dependency injection for plain callables.

vaccinate invokes a function with the dependencies it declares. A dependency
is either a name, which is imported, or any other value, which is passed
through unchanged. Imported values that declare dependencies of their own are
injected first, so a module can export an uninstantiated factory and have it
"vaccinated" before it is handed on.

Key Features:
    - Dependencies declared as an ordered list on the target itself
    - Names resolved through the import system: dotted modules, ``module:attr``
      selectors and source file paths
    - Relative names (``./name``) searched across one or more module directories
    - Pluggable loaders, including a registry-backed loader for tests
    - No caching: every call resolves its dependencies afresh

Basic Usage:
    >>> from vaccinate import vaccinate, vaccinations
    >>>
    >>> @vaccinations("./db", "json:dumps")
    ... def make_exporter(db, dumps):
    ...     return lambda user_id: dumps(db.find(user_id))
    >>>
    >>> export = vaccinate(make_exporter, {"module_dir": "/srv/app/modules"})

The package consists of:
    - injector: the ``vaccinate`` entry point
    - configuration: process-wide default options and scoped overrides
    - loaders: strategies turning references into values
    - domain: the options record and declaration helpers
    - errors: package-specific exceptions
"""

import logging

from vaccinate.configuration import Defaults, defaults, overridden_defaults
from vaccinate.domain import (
    DEFAULT_DEPENDENCIES_PROPERTY,
    Options,
    declared_dependencies,
    is_declaring_target,
    vaccinations,
)
from vaccinate.errors import (
    CyclicDependencyError,
    DependencyError,
    MissingDeclarationError,
    ResolutionError,
)
from vaccinate.injector import inject, vaccinate
from vaccinate.loaders import (
    DefaultLoader,
    FunctionLoader,
    Loader,
    RegistryLoader,
    default_loader,
    import_reference,
)

__all__ = [
    "DEFAULT_DEPENDENCIES_PROPERTY",
    "CyclicDependencyError",
    "DefaultLoader",
    "Defaults",
    "DependencyError",
    "FunctionLoader",
    "Loader",
    "MissingDeclarationError",
    "Options",
    "RegistryLoader",
    "ResolutionError",
    "declared_dependencies",
    "default_loader",
    "defaults",
    "import_reference",
    "inject",
    "is_declaring_target",
    "overridden_defaults",
    "vaccinate",
    "vaccinations",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
