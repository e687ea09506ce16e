"""Global exception handling for the controller process."""

from __future__ import annotations

import logging
import sys
import threading
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger("app.exceptions")


def install_exception_hook(on_fatal: Optional[Callable[[], None]] = None) -> None:
    """Log unhandled exceptions from the main thread and worker threads.

    ``on_fatal`` is called after a worker thread dies so the caller can shut
    the remaining threads down instead of running half a controller.
    """

    hook = _ExceptionHook(on_fatal=on_fatal)
    hook.install()


@dataclass
class _ExceptionHook:
    on_fatal: Optional[Callable[[], None]] = None
    _original_excepthook: Optional[Callable] = None
    _original_thread_excepthook: Optional[Callable] = None

    def install(self) -> None:
        self._original_excepthook = sys.excepthook
        sys.excepthook = self._handle_exception

        self._original_thread_excepthook = threading.excepthook
        threading.excepthook = self._handle_thread_exception  # type: ignore[assignment]

    def _handle_exception(self, exc_type, exc_value, exc_traceback) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            if self._original_excepthook:
                self._original_excepthook(exc_type, exc_value, exc_traceback)
            return
        logger.critical(
            "Unhandled exception: %s",
            exc_value,
            exc_info=(exc_type, exc_value, exc_traceback),
        )
        if self._original_excepthook:
            self._original_excepthook(exc_type, exc_value, exc_traceback)

    def _handle_thread_exception(self, args: "threading.ExceptHookArgs") -> None:
        thread_name = args.thread.name if args.thread is not None else "<unknown>"
        logger.critical(
            "Unhandled thread exception in %s: %s",
            thread_name,
            args.exc_value,
            exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
        )
        if self.on_fatal is not None:
            self.on_fatal()
        if self._original_thread_excepthook:
            self._original_thread_excepthook(args)
