"""Strategies for turning dependency references into values.

A loader is any object with a ``resolve(reference, options)`` method. The
injector calls it once per declared reference, in declaration order, and hands
whatever it returns to the target. Plain functions with the same signature are
accepted wherever a loader is and are wrapped in :class:`FunctionLoader`.

The :class:`DefaultLoader` passes non-string references through unchanged and
imports string references:

    >>> default_loader.resolve("json", options)             # the json module
    >>> default_loader.resolve("json:dumps", options)       # json.dumps
    >>> default_loader.resolve("/srv/app/db.py", options)   # a source file
    >>> default_loader.resolve("./db", options)             # db under options.module_dir
"""

import dataclasses
import hashlib
import importlib.util
import logging
import os
import pkgutil
import re
import sys
from functools import reduce
from typing import Any, Callable, Mapping, Optional, Protocol, runtime_checkable

from vaccinate.domain import DependencyReference, ModuleDir, Options, is_declaring_target
from vaccinate.errors import CyclicDependencyError, ResolutionError

__all__ = [
    "RELATIVE_PREFIX",
    "Loader",
    "FunctionLoader",
    "DefaultLoader",
    "RegistryLoader",
    "as_loader",
    "default_loader",
    "import_reference",
    "join_reference",
]

logger = logging.getLogger(__name__)

RELATIVE_PREFIX = "./"

_ATTRIBUTE_PATH = re.compile(r"^[A-Za-z_]\w*(\.[A-Za-z_]\w*)*$")


@runtime_checkable
class Loader(Protocol):
    """Resolves one dependency reference.

    Implementations raise :class:`~vaccinate.errors.ResolutionError` for names
    they cannot load.
    """

    def resolve(self, reference: DependencyReference, options: Options) -> Any:
        ...


class FunctionLoader:
    """Adapts a ``(reference, options) -> value`` function to :class:`Loader`."""

    def __init__(self, func: Callable[[DependencyReference, Options], Any]):
        self.func = func

    def resolve(self, reference: DependencyReference, options: Options) -> Any:
        return self.func(reference, options)

    def __repr__(self):
        return f"FunctionLoader({self.func!r})"


def as_loader(loader: Any) -> Loader:
    """Return ``loader`` as a :class:`Loader`, wrapping plain functions.

    Raises:
        TypeError: If ``loader`` is neither a loader nor callable.
    """
    if isinstance(loader, Loader):
        return loader
    if callable(loader):
        return FunctionLoader(loader)
    raise TypeError(f"{loader!r} is not a loader or a function")


class DefaultLoader:
    """Loads string references through the import system.

    Resolution of a string reference:

    1. Names starting with ``./`` are relative. When ``options.module_dir`` is
       set they are joined to it with :func:`join_reference`; a sequence of
       bases is tried in order and the first that loads wins. If none loads,
       the error from the *last* base is raised.
    2. Other names, and relative names when ``module_dir`` is None or an
       empty string, are loaded with :func:`import_reference` exactly as given.
    3. A loaded value that is itself a declaring target is injected with the
       same options, and the result of that call is returned instead.

    Nothing is cached here; repeated imports are served by ``sys.modules``.
    """

    def resolve(self, reference: DependencyReference, options: Options) -> Any:
        if not isinstance(reference, str):
            return reference

        key, dependency = self._load(reference, options.module_dir)
        return inject_if_declaring(key, dependency, options)

    def _load(self, reference: str, module_dir: ModuleDir) -> tuple[str, Any]:
        if isinstance(module_dir, (str, os.PathLike)):
            module_dir = os.fspath(module_dir) or None
        if module_dir is None or not reference.startswith(RELATIVE_PREFIX):
            return reference_key(reference), import_reference(reference)

        if isinstance(module_dir, str):
            bases = [module_dir]
        else:
            bases = [os.fspath(base) for base in module_dir]
        if not bases:
            raise ResolutionError(
                reference, f"Cannot load {reference!r}: module_dir is an empty list"
            )

        failure = None
        for base in bases:
            candidate = join_reference(base, reference)
            try:
                dependency = import_reference(candidate)
            except ResolutionError as ex:
                logger.debug("%r not loadable from %r: %s", reference, base, ex)
                failure = ex
                continue
            logger.debug("Loaded %r from %r", reference, base)
            return reference_key(candidate), dependency

        raise failure

    def __repr__(self):
        return "DefaultLoader()"


default_loader = DefaultLoader()


class RegistryLoader:
    """Looks string references up in a mapping instead of importing them.

    Useful in tests, where a fake can be registered under the name the
    production code declares:

        >>> loader = RegistryLoader({"./db": FakeDb()})
        >>> vaccinate(make_service, {"loader": loader})

    Registered values that are declaring targets are injected before use.
    Unregistered names go to ``fallback`` if one is given.
    """

    def __init__(
        self,
        registry: Optional[Mapping[str, Any]] = None,
        fallback: Optional[Any] = None,
    ):
        self._registry = dict(registry or {})
        self._fallback = as_loader(fallback) if fallback is not None else None

    def register(self, name: str, value: Any):
        """Register ``value`` under ``name``, replacing any previous entry."""
        self._registry[name] = value

    def resolve(self, reference: DependencyReference, options: Options) -> Any:
        if not isinstance(reference, str):
            return reference
        if reference in self._registry:
            return inject_if_declaring(reference, self._registry[reference], options)
        if self._fallback is not None:
            return self._fallback.resolve(reference, options)
        raise ResolutionError(reference, f"Nothing registered as {reference!r}")


def inject_if_declaring(key: str, dependency: Any, options: Options) -> Any:
    """Inject ``dependency`` if it declares dependencies of its own.

    Args:
        key: Identifies the module or registry entry ``dependency`` came from.
        dependency: The loaded value.
        options: The options of the injection that loaded it.

    Raises:
        CyclicDependencyError: If ``key`` is already being injected further up.
    """
    if not is_declaring_target(dependency, options.dependencies_property):
        return dependency

    if key in options.resolving:
        raise CyclicDependencyError(options.resolving + (key,))

    from vaccinate.injector import inject

    logger.debug("Injecting dependencies of %r", key)
    return inject(dependency, dataclasses.replace(options, resolving=options.resolving + (key,)))


def import_reference(name: str) -> Any:
    """Load a module, or an attribute of one, by name.

    ``name`` is either a path to a source file (anything containing a path
    separator or ending in ``.py``) or a dotted module name. Either may be
    followed by ``:attribute.path`` to select an attribute of the module.

    Raises:
        ResolutionError: If the module cannot be found, fails while executing,
            or lacks the attribute.
    """
    module_name, attribute = split_attribute(name)
    try:
        if not _is_path(module_name):
            return pkgutil.resolve_name(name)
        module = _load_source(module_name)
        if attribute is None:
            return module
        return reduce(getattr, attribute.split("."), module)
    except ResolutionError:
        raise
    except Exception as ex:
        raise ResolutionError(name, f"Cannot load {name!r}: {ex!r}") from ex


def join_reference(base: str, reference: str) -> str:
    """Prefix a relative reference with a module directory.

    Filesystem bases are joined as paths; anything else is taken to be a
    dotted package name.

    Example:
        >>> join_reference("/srv/app", "./db/models")        # "/srv/app/db/models"
        >>> join_reference("app.services", "./db/models")    # "app.services.db.models"
        >>> join_reference("app", "./db:connect")            # "app.db:connect"
    """
    module_name, attribute = split_attribute(reference)
    if _is_path(base) or os.path.isdir(base):
        joined = os.path.normpath(os.path.join(base, module_name))
    else:
        relative = module_name[len(RELATIVE_PREFIX):] if module_name.startswith(RELATIVE_PREFIX) else module_name
        joined = f"{base}.{relative.strip('/').replace('/', '.')}"
    return joined if attribute is None else f"{joined}:{attribute}"


def split_attribute(name: str) -> tuple[str, Optional[str]]:
    """Split ``"module:attr.path"`` into its module and attribute parts."""
    module_name, separator, attribute = name.rpartition(":")
    if separator and module_name and _ATTRIBUTE_PATH.match(attribute):
        return module_name, attribute
    return name, None


def reference_key(name: str) -> str:
    """Normalise ``name`` so that different spellings of one module compare equal."""
    module_name, attribute = split_attribute(name)
    if not _is_path(module_name):
        return name
    key = os.path.abspath(module_name)
    if key.endswith(".py"):
        key = key[:-3]
    return key if attribute is None else f"{key}:{attribute}"


def _is_path(name: str) -> bool:
    return (
        "/" in name
        or os.sep in name
        or (os.altsep is not None and os.altsep in name)
        or name.endswith(".py")
    )


def _load_source(path: str):
    filename = _find_source(path)
    if filename is None:
        raise ResolutionError(path, f"Cannot find module {path!r}")

    module_name = _module_name_for(filename)
    if module_name in sys.modules:
        return sys.modules[module_name]

    if os.path.basename(filename) == "__init__.py":
        spec = importlib.util.spec_from_file_location(
            module_name, filename, submodule_search_locations=[os.path.dirname(filename)]
        )
    else:
        spec = importlib.util.spec_from_file_location(module_name, filename)
    module = importlib.util.module_from_spec(spec)

    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


def _find_source(path: str) -> Optional[str]:
    path = os.path.abspath(path)
    candidates = [path, path + ".py", os.path.join(path, "__init__.py")]
    return next((c for c in candidates if os.path.isfile(c)), None)


def _module_name_for(filename: str) -> str:
    """Name a source file's module uniquely by its absolute path."""
    stem = os.path.splitext(os.path.basename(filename))[0]
    if stem == "__init__":
        stem = os.path.basename(os.path.dirname(filename))
    digest = hashlib.sha1(filename.encode("utf-8")).hexdigest()[:12]
    return "_vaccinated_" + re.sub(r"\W", "_", stem) + "_" + digest
