# hosts.py
"""
Timer hosts for the find controller.

The controller only needs the Tk timer contract, ``after(ms, func, *args)``
returning a handle and ``after_cancel(handle)``, so any Tk widget can be
passed in as-is. ``LoopHost`` provides the same contract on top of asyncio.
"""
import asyncio
from typing import Callable, Optional


class LoopHost:
    """Runs timer callbacks on an asyncio event loop."""
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop or asyncio.get_running_loop()

    def after(self, ms: int, func: Callable, *args) -> asyncio.TimerHandle:
        return self.loop.call_later(max(ms, 0) / 1000.0, func, *args)

    def after_cancel(self, handle: asyncio.TimerHandle):
        if handle is not None:
            handle.cancel()
