"""Update notification flow for an installed new version of the client.

The install channel reports events; this module only decides what they mean:

    Clean --waiting version--> Waiting --controller changed--> Reloading

Dismissing hides the toast but keeps the waiting handle. Activating sends the
skip-waiting message; the switch to Reloading only happens once the new
version actually takes control.
"""
from __future__ import annotations
import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional, Protocol

logger = logging.getLogger(__name__)

SKIP_WAITING: Dict[str, Any] = {"type": "SKIP_WAITING"}


class WorkerHandle(Protocol):
    def post_message(self, message: Dict[str, Any]) -> None:
        ...


class UpdatePhase(str, Enum):
    clean = "clean"
    waiting = "waiting"
    reloading = "reloading"


class UpdateLifecycle:
    def __init__(
        self,
        reload: Callable[[], None],
        on_change: Optional[Callable[["UpdateLifecycle"], None]] = None,
    ):
        self.reload = reload
        self.on_change = on_change
        self.waiting_handle: Optional[WorkerHandle] = None
        self.toast_visible = False
        self.is_reloading = False

    @property
    def phase(self) -> UpdatePhase:
        if self.is_reloading:
            return UpdatePhase.reloading
        if self.waiting_handle is not None:
            return UpdatePhase.waiting
        return UpdatePhase.clean

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    def on_waiting_version(self, handle: WorkerHandle) -> None:
        if self.is_reloading:
            logger.debug("ignoring waiting version while reloading")
            return
        self.waiting_handle = handle
        self.toast_visible = True
        logger.info("new version installed and waiting")
        self._changed()

    def on_registered(self, waiting: Optional[WorkerHandle] = None) -> None:
        if waiting is not None:
            self.on_waiting_version(waiting)

    def on_worker_state_change(self, worker: WorkerHandle, state: str, has_controller: bool) -> None:
        # Without a controller this is the first install, not an update.
        if state == "installed" and has_controller:
            self.on_waiting_version(worker)

    def on_registration_failed(self, error: BaseException) -> None:
        logger.error("update channel registration failed: %s", error)

    def dismiss(self) -> None:
        self.toast_visible = False
        self._changed()

    def activate(self) -> bool:
        if self.waiting_handle is None:
            return False
        self.waiting_handle.post_message(dict(SKIP_WAITING))
        self.toast_visible = False
        logger.info("asked waiting version to take control")
        self._changed()
        return True

    def on_controller_changed(self) -> bool:
        """Reload once; repeated notifications are ignored."""
        if self.is_reloading:
            return False
        self.is_reloading = True
        self.toast_visible = False
        logger.info("controller changed; reloading")
        self._changed()
        self.reload()
        return True
