from __future__ import annotations

import asyncio
from typing import Optional

DISMISS_AFTER_SEC = 2.2


class Toaster:
    """Single transient notification; a new message replaces and re-times the old one."""

    def __init__(self, dismiss_after: float = DISMISS_AFTER_SEC) -> None:
        self.dismiss_after = dismiss_after
        self.text: Optional[str] = None
        self._timer: Optional[asyncio.TimerHandle] = None

    def show(self, text: str) -> None:
        self.text = text
        if self._timer is not None:
            self._timer.cancel()
        self._timer = asyncio.get_running_loop().call_later(self.dismiss_after, self.dismiss)

    def dismiss(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.text = None
