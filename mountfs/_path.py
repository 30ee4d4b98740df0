from __future__ import annotations

import re

from ._exceptions import PathError

SEP = "/"
ROOT = "/"

_SEP_RUN = re.compile(r"/+")


def _check(path: object) -> str:
    if not isinstance(path, str):
        raise PathError(f"Path must be a string, not {type(path).__name__}")
    if "\0" in path:
        raise PathError(f"Path contains a NUL character: {path!r}")
    return path


def canonicalize(path: str, base: str = ROOT, base_is_container: bool = True) -> str:
    """Return the canonical absolute form of *path*.

    A relative *path* is resolved against *base* when *base_is_container*
    is true, otherwise against the parent of *base*. ``.`` components are
    dropped, ``..`` pops the previous component and ``..`` at the root
    stays at the root.
    """
    _check(path)
    if not path.startswith(SEP):
        if not base_is_container:
            base = dirname(canonicalize(base))
        path = base + SEP + path

    components: list[str] = []
    for part in _SEP_RUN.split(path):
        if not part or part == ".":
            continue
        if part == "..":
            if components:
                components.pop()
            continue
        components.append(part)
    return SEP + SEP.join(components)


def split_path(path: str) -> list[str]:
    """Components of an absolute path; the root has none."""
    return [p for p in _check(path).split(SEP) if p]


def join_path(base: str, name: str) -> str:
    return base.rstrip(SEP) + SEP + name


def basename(path: str) -> str:
    if path == ROOT:
        return ROOT
    return path.rsplit(SEP, 1)[1]


def dirname(path: str) -> str:
    if path == ROOT:
        return ROOT
    head = path.rsplit(SEP, 1)[0]
    return head or ROOT


def validate_name(name: str) -> str:
    """Check that *name* can be used as a single path component."""
    _check(name)
    if not name:
        raise PathError("Name must not be empty.")
    if SEP in name:
        raise PathError(f"Name {name!r} is a path rather than a name (it contains a slash).")
    if name in (".", ".."):
        raise PathError(f"Name {name!r} is reserved.")
    return name


def is_under(path: str, prefix: str) -> bool:
    """True when canonical *path* equals *prefix* or lies below it."""
    if prefix == ROOT:
        return True
    return path == prefix or path.startswith(prefix + SEP)


def is_strictly_under(path: str, prefix: str) -> bool:
    return path != prefix and is_under(path, prefix)


def strip_prefix(path: str, prefix: str) -> str:
    """Path of *path* relative to *prefix*, as an absolute path."""
    if prefix == ROOT:
        return path
    rest = path[len(prefix):]
    if not rest.startswith(SEP):
        rest = SEP + rest
    return rest
