"""GUIDIndex - instance identity of one running app instance.

Format: ``<app-guid>/<instance-index>``, e.g.
``7b8228a0-cf40-42d8-a7bb-b287a88198a3/0``.
"""

from __future__ import annotations


SEPARATOR = "/"
DEFAULT_INDEX = "0"


class GUIDIndex(str):
    """Concatenation of app GUID and instance index.

    Example:
        >>> GUIDIndex("7b8228a0/3").guid()
        '7b8228a0'
        >>> GUIDIndex("7b8228a0").index()
        '0'
    """

    __slots__ = ()

    def guid(self) -> str:
        """App GUID: everything before the first separator."""
        return self.split(SEPARATOR, 1)[0]

    def index(self) -> str:
        """Instance index: everything after the first separator, ``"0"`` if absent."""
        parts = self.split(SEPARATOR, 1)
        if len(parts) < 2:
            return DEFAULT_INDEX
        return parts[1]


def entity_id(identity: str) -> str:
    return GUIDIndex(identity).guid()


def instance_index(identity: str) -> str:
    return GUIDIndex(identity).index()
