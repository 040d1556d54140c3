"""
Revocable display handles.

A display handle is a short string token standing in for a preview
resource (a source file path or encoded PNG bytes). Widgets look payloads
up by handle; the session revokes handles whenever it discards the
images they refer to, so the registry never grows across uploads.
"""

import itertools
import logging
from typing import Any, Dict, Iterable

from BC_Libs.constants import DISPLAY_HANDLE_PREFIX

logger = logging.getLogger(__name__)


class DisplayHandleRegistry:
    """
    Registry of live display handles.

    Example:
        >>> registry = DisplayHandleRegistry()
        >>> handle = registry.allocate(Path("photo.jpg"))
        >>> registry.resolve(handle)
        PosixPath('photo.jpg')
        >>> registry.revoke(handle)
        True
    """

    def __init__(self):
        self._payloads: Dict[str, Any] = {}
        self._counter = itertools.count(1)

    def allocate(self, payload: Any) -> str:
        """
        Allocate a new handle for a payload.

        Args:
            payload: The resource the handle refers to

        Returns:
            The new handle string
        """
        handle = f"{DISPLAY_HANDLE_PREFIX}{next(self._counter)}"
        self._payloads[handle] = payload
        return handle

    def resolve(self, handle: str) -> Any:
        """
        Look up the payload for a handle.

        Raises:
            KeyError: If the handle was never allocated or has been revoked
        """
        try:
            return self._payloads[handle]
        except KeyError:
            raise KeyError(f"Unknown or revoked display handle: {handle}") from None

    def is_active(self, handle: str) -> bool:
        return handle in self._payloads

    def revoke(self, handle: str) -> bool:
        """Revoke a handle. Returns False if it was not active."""
        if handle not in self._payloads:
            return False
        del self._payloads[handle]
        return True

    def revoke_many(self, handles: Iterable[str]) -> int:
        revoked = sum(1 for handle in handles if handle and self.revoke(handle))
        if revoked:
            logger.debug(f"Revoked {revoked} display handle(s)")
        return revoked

    def revoke_all(self) -> int:
        count = len(self._payloads)
        self._payloads.clear()
        return count

    def active_count(self) -> int:
        return len(self._payloads)
