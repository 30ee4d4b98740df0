"""Backend factory: turns a short name or a backend spec into a root object."""

from __future__ import annotations

import importlib
import logging
import re
from collections.abc import Callable, Mapping
from typing import Any

from ._exceptions import UnknownBackendError
from ._object import FileSystemObject
from ._typing import BackendSpec

logger = logging.getLogger(__name__)

_SHORT_NAME = re.compile(r"^\w+$")
_QUALIFIED_NAME = re.compile(r"^[\w.]+([.:]\w+)$")

Factory = Callable[..., FileSystemObject]

_registry: dict[str, Factory | str] = {
    "memory": "mountfs._memory:MemoryObject",
    "real": "mountfs._real:RealObject",
    "table": "mountfs._table:MountTable",
}


def register_backend(name: str, factory: Factory | str) -> None:
    """Register *factory* under the short *name*.

    *factory* is a callable returning a :class:`FileSystemObject`, or a
    ``"module:attribute"`` reference loaded on first use.
    """
    if not _SHORT_NAME.match(name):
        raise ValueError(f"Invalid backend name: {name!r}")
    _registry[name.lower()] = factory
    logger.debug("Registered backend %r", name)


def unregister_backend(name: str) -> None:
    try:
        del _registry[name.lower()]
    except KeyError:
        raise UnknownBackendError(f"No backend registered as {name!r}") from None


def available_backends() -> list[str]:
    return sorted(_registry)


def _load(reference: str) -> Factory:
    if ":" in reference:
        module_name, _, attr = reference.partition(":")
    else:
        module_name, _, attr = reference.rpartition(".")
    try:
        module = importlib.import_module(module_name)
        return getattr(module, attr)
    except (ImportError, AttributeError, ValueError) as exc:
        raise UnknownBackendError(f"Failed to load backend {reference!r}: {exc}") from exc


def _resolve_factory(name: str) -> Factory:
    if not isinstance(name, str):
        raise TypeError(f"Backend name must be a string, not {type(name).__name__}")
    factory = _registry.get(name.lower())
    if factory is None:
        if not _QUALIFIED_NAME.match(name):
            raise UnknownBackendError(f"Unknown backend: {name!r}")
        factory = name
    if isinstance(factory, str):
        factory = _load(factory)
    return factory


def new(name: str, *args: Any, **kwargs: Any) -> FileSystemObject:
    """Create the root object of the backend called *name*.

    >>> root = new("memory")
    >>> root = new("real", root="/srv/data")
    >>> root = new("mypackage.backends:S3Object", bucket="b")
    """
    factory = _resolve_factory(name)
    obj = factory(*args, **kwargs)
    if not isinstance(obj, FileSystemObject):
        raise TypeError(f"Backend {name!r} returned {type(obj).__name__}, not a FileSystemObject")
    logger.debug("Created %s backend %r", name, obj)
    return obj


def build_backend(spec: BackendSpec) -> FileSystemObject:
    """Turn a backend spec into an object.

    A spec is an existing object, a backend name, or a tuple/list
    ``(name, *args)`` whose last item may be a dict of keyword arguments.
    """
    if isinstance(spec, FileSystemObject):
        return spec
    if isinstance(spec, str):
        return new(spec)
    if isinstance(spec, (tuple, list)) and spec and isinstance(spec[0], str):
        name, *args = spec
        kwargs: dict[str, Any] = {}
        if args and isinstance(args[-1], Mapping):
            kwargs = dict(args.pop())
        return new(name, *args, **kwargs)
    raise TypeError(
        f"A backend must be a FileSystemObject or a (name, *args) spec, not {spec!r}"
    )
