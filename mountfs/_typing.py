from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Callable, NamedTuple, TypedDict, Union

if TYPE_CHECKING:
    from ._object import FileSystemObject


class FindDecision(NamedTuple):
    """What a ``find`` predicate decided about one visited object."""

    include: bool
    prune_subtree: bool = False


FindPredicate = Callable[["FileSystemObject"], Union[FindDecision, bool]]

# A backend spec is an object, a registered name, or (name, *args[, kwargs]).
BackendSpec = Union["FileSystemObject", str, Sequence[Any]]
MountSpec = Union[Mapping[str, BackendSpec], Sequence[tuple[str, BackendSpec]]]


class MemoryStatResult(TypedDict):
    size: int
    created_at: float
    modified_at: float
    generation: int
    is_dir: bool
