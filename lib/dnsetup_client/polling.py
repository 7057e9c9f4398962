from __future__ import annotations

import threading
import time
from typing import Callable


def wait_until(
        predicate: Callable[[], bool],
        *,
        timeout_s: float,
        interval_s: float,
        cancel: threading.Event | None = None,
        on_tick: Callable[[float], None] | None = None,
        on_timeout: Callable[[], None] | None = None,
) -> bool:
    """Poll ``predicate`` until it holds, the budget runs out, or ``cancel`` is set.

    Returns True only when the predicate held. The last sleep is clipped to the
    deadline and followed by one final check. ``on_timeout`` is not called when
    the wait was cancelled.
    """
    stop = cancel or threading.Event()
    deadline = time.monotonic() + max(0.0, float(timeout_s))
    while True:
        if predicate():
            return True
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        if stop.wait(min(max(0.0, float(interval_s)), remaining)):
            return False
        if on_tick:
            on_tick(max(0.0, deadline - time.monotonic()))
    if on_timeout:
        on_timeout()
    return False
