"""Process-wide default options and the merging of per-call overrides.

``defaults`` is read at the start of every injection, so changing one of its
fields affects every later call that does not override that field. Set it once
at startup, or change it for a bounded region with :func:`overridden_defaults`:

    >>> with overridden_defaults(module_dir="/srv/app/modules"):
    ...     vaccinate(main)
"""

import dataclasses
from collections.abc import Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Union

from vaccinate.domain import DEFAULT_DEPENDENCIES_PROPERTY, ModuleDir, Options
from vaccinate.loaders import as_loader, default_loader

__all__ = ["OPTION_NAMES", "Defaults", "defaults", "overridden_defaults", "reset"]

OPTION_NAMES = frozenset({"dependencies_property", "module_dir", "loader"})


@dataclass
class Defaults:
    """Mutable fallback values for every option not given to a call.

    Attributes:
        dependencies_property: Attribute holding a target's declaration.
        module_dir: Base(s) for names starting with ``./``; None disables prefixing.
        loader: A :class:`~vaccinate.loaders.Loader`, or a plain
            ``(reference, options)`` function.
    """

    dependencies_property: str = DEFAULT_DEPENDENCIES_PROPERTY
    module_dir: ModuleDir = None
    loader: Any = default_loader

    def merge(self, overrides: Union[None, Options, Mapping[str, Any]] = None) -> Options:
        """Snapshot these defaults under the given overrides.

        Only names missing from ``overrides`` are taken from the defaults; an
        explicit None is kept.

        Args:
            overrides: None, a mapping of option names to values, or a complete
                :class:`Options`, which is used as given apart from wrapping a
                plain loader function.

        Returns:
            The :class:`Options` for one call.

        Raises:
            ValueError: If ``overrides`` names an unknown option.
        """
        if isinstance(overrides, Options):
            return dataclasses.replace(overrides, loader=as_loader(overrides.loader))

        overrides = dict(overrides or {})
        _check_option_names(overrides)
        values = {name: getattr(self, name) for name in OPTION_NAMES}
        values.update(overrides)
        values["loader"] = as_loader(values["loader"])
        return Options(**values)


defaults = Defaults()
"""The defaults consulted by :func:`vaccinate.vaccinate`."""


@contextmanager
def overridden_defaults(
    target: Optional[Defaults] = None, **changes: Any
) -> Iterator[Defaults]:
    """Temporarily change fields of ``target`` (the global defaults by default).

    The previous values are restored on exit, including when the block raises.

    Raises:
        ValueError: If ``changes`` names an unknown option.
    """
    target = target if target is not None else defaults
    _check_option_names(changes)
    previous = {name: getattr(target, name) for name in changes}
    for name, value in changes.items():
        setattr(target, name, value)
    try:
        yield target
    finally:
        for name, value in previous.items():
            setattr(target, name, value)


def _check_option_names(options: Mapping[str, Any]):
    unknown = options.keys() - OPTION_NAMES
    if unknown:
        raise ValueError(
            f"Unknown options {sorted(unknown)}; expected some of {sorted(OPTION_NAMES)}"
        )


def reset(target: Optional[Defaults] = None):
    """Put every field of ``target`` (the global defaults by default) back to its initial value."""
    target = target if target is not None else defaults
    for field in dataclasses.fields(Defaults):
        setattr(target, field.name, field.default)
