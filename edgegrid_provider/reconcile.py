"""Set reconciliation for set-valued attributes such as hostname lists."""

from enum import Enum
from typing import Iterable, Set


class Mode(str, Enum):
    """How a caller-supplied set combines with the current remote set."""

    APPEND = "APPEND"
    REPLACE = "REPLACE"
    REMOVE = "REMOVE"


MODES = tuple(m.value for m in Mode)


def reconcile(current: Iterable[str], requested: Iterable[str], mode: str) -> Set[str]:
    """
    Computes the set to write upstream.

    `current` must come from a fresh read of the remote object: the result is
    only as good as that read, and nothing guards against a concurrent writer
    changing the object between the read and the write.

    - REPLACE discards the current set.
    - APPEND returns the union.
    - REMOVE returns the current set minus the requested elements.
    """
    mode = Mode(mode)
    current_set = set(current)
    requested_set = set(requested)

    if mode is Mode.APPEND:
        return current_set | requested_set
    if mode is Mode.REMOVE:
        return current_set - requested_set
    return requested_set
