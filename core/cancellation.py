from __future__ import annotations

import threading
from typing import Optional

from base_classes import PromptCancelled


class CancellationToken:
    """Lightweight, thread-safe cancellation token for a prompt.

    - cancel(reason) marks the token cancelled; may be called from another thread.
    - is_cancelled() is polled by the prompt loop before every read.
    - raise_if_cancelled() converts a cancelled token into PromptCancelled.
    """

    def __init__(self) -> None:
        self._ev = threading.Event()
        self._reason: Optional[str] = None
        self._lock = threading.Lock()

    def cancel(self, reason: Optional[str] = None) -> None:
        with self._lock:
            if not self._ev.is_set():
                self._reason = reason
                self._ev.set()

    def is_cancelled(self) -> bool:
        return self._ev.is_set()

    def reason(self) -> Optional[str]:
        return self._reason

    def raise_if_cancelled(self) -> None:
        if self._ev.is_set():
            raise PromptCancelled(self._reason)
