from ._exceptions import (
    AlreadyMounted,
    ContainerNotEmpty,
    ContainerRequiresForce,
    CrossBackendError,
    DestinationExists,
    FSError,
    InvalidObjectError,
    MountPointMissing,
    MountPointNotContainer,
    MountShadowWarning,
    MountTableError,
    NestedMountConflict,
    NodeLimitExceeded,
    NotAContainer,
    NotMounted,
    PathError,
    PatternSyntaxError,
    RootAlreadyMounted,
    RootUnmountable,
    UnknownBackendError,
    UnknownProperty,
)
from ._glob import compile_glob, glob_filter, match_glob
from ._handle import MemoryFileHandle
from ._memory import MemoryObject
from ._object import FileSystemObject
from ._path import canonicalize
from ._real import RealObject
from ._registry import available_backends, build_backend, new, register_backend, unregister_backend
from ._table import MountMap, MountTable
from ._text import TextHandle
from ._typing import FindDecision, MemoryStatResult

__all__ = [
    "FileSystemObject",
    "MemoryObject",
    "RealObject",
    "MountTable",
    "MountMap",
    "MemoryFileHandle",
    "TextHandle",
    "FindDecision",
    "MemoryStatResult",
    "canonicalize",
    "compile_glob",
    "match_glob",
    "glob_filter",
    "new",
    "build_backend",
    "register_backend",
    "unregister_backend",
    "available_backends",
    "FSError",
    "PathError",
    "PatternSyntaxError",
    "InvalidObjectError",
    "NotAContainer",
    "ContainerNotEmpty",
    "CrossBackendError",
    "ContainerRequiresForce",
    "DestinationExists",
    "UnknownProperty",
    "UnknownBackendError",
    "NodeLimitExceeded",
    "MountTableError",
    "MountPointMissing",
    "MountPointNotContainer",
    "NestedMountConflict",
    "AlreadyMounted",
    "RootAlreadyMounted",
    "RootUnmountable",
    "NotMounted",
    "MountShadowWarning",
]
__version__ = "0.1.0"
