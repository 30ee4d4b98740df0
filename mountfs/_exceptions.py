class FSError(Exception):
    """Base class for every error raised by mountfs."""


class PathError(FSError, ValueError):
    """Raised for a malformed path or name."""


class PatternSyntaxError(FSError, ValueError):
    """Raised when a glob pattern cannot be compiled."""
    def __init__(self, message: str, pattern: str, position: int) -> None:
        self.pattern = pattern
        self.position = position
        super().__init__(f"{message} at position {position} in glob {pattern!r}")


class InvalidObjectError(FSError, FileNotFoundError):
    """Raised when an object is used after its node has been removed."""


class NotAContainer(FSError, NotADirectoryError):
    pass


class ContainerNotEmpty(FSError, OSError):
    pass


class CrossBackendError(FSError, OSError):
    """Raised when move/copy would cross from one backend to another."""


class ContainerRequiresForce(FSError, IsADirectoryError):
    """Raised when a container is moved or copied without ``force``."""


class DestinationExists(FSError, FileExistsError):
    pass


class UnknownProperty(FSError, KeyError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Unknown property: {self.key!r}"


class UnknownBackendError(FSError, LookupError):
    pass


class NodeLimitExceeded(FSError, OSError):
    """Raised when the node count limit of a memory backend is exceeded."""
    def __init__(self, current: int, limit: int) -> None:
        self.current = current
        self.limit = limit
        super().__init__(
            f"Node limit exceeded: current {current} nodes, limit is {limit}."
        )


# ---------------------------------------------------------------------------
#  Mount table
# ---------------------------------------------------------------------------


class MountTableError(FSError, OSError):
    """Base class for mount table invariant violations."""


class MountPointMissing(MountTableError, FileNotFoundError):
    pass


class MountPointNotContainer(MountTableError, NotADirectoryError):
    pass


class NestedMountConflict(MountTableError):
    pass


class AlreadyMounted(NestedMountConflict):
    pass


class RootAlreadyMounted(MountTableError):
    pass


class RootUnmountable(MountTableError):
    pass


class NotMounted(MountTableError):
    pass


class MountShadowWarning(UserWarning):
    """Emitted when a mount hides children of the container it is mounted on."""
