"""
Persistence sync.

Keeps the board service in step with the local BoardModel:

- on start-up the stored snapshot for the session replaces the (empty)
  local board
- every board change (re)starts a debounce timer; when it fires the
  whole snapshot is pushed, last write wins
- a transient "saved" status is shown after each successful push

Service calls run on worker threads so a slow or unreachable service
never stalls painting or input. Snapshots are taken on the GUI thread
before a call starts, and results come back through queued signals.
Failures never reach the user as errors: they are logged and the board
keeps working in memory.
"""

import logging
from enum import Enum
from typing import Any, Callable, Optional

from PyQt6.QtCore import (
    QCoreApplication, QElapsedTimer, QObject, QThread, QTimer, pyqtSignal,
)

from models.board import BoardModel
from .board_client import BoardClient, BoardServiceError
from .interaction import InteractionController

logger = logging.getLogger(__name__)


SAVE_DEBOUNCE_MS = 1500
SAVED_STATUS_MS = 1500
WAIT_TIMEOUT_MS = 10000


class SaveStatus(str, Enum):
    """Save indicator state."""
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"


class ServiceCall(QThread):
    """Worker thread running one board service call."""

    succeeded = pyqtSignal(object)  # call result
    failed = pyqtSignal(str)        # error message

    def __init__(self, call: Callable[[], Any], parent: Optional[QObject] = None):
        super().__init__(parent)
        self._call = call

    def run(self):
        try:
            result = self._call()
        except BoardServiceError as e:
            self.failed.emit(str(e))
            return
        self.succeeded.emit(result)


class PersistenceSync(QObject):
    """
    Debounced load/save of one board session.

    Connect ``schedule_save`` to the controller's ``boardChanged``
    signal (done automatically when a controller is given). With no
    client the sync is inert and the board is purely local.

    At most one save is in flight; changes made meanwhile are pushed
    once it completes, so the service always ends with the latest
    snapshot.
    """

    statusChanged = pyqtSignal(object)   # SaveStatus
    boardLoaded = pyqtSignal()
    boardDeleted = pyqtSignal(bool)

    def __init__(self,
                 board: BoardModel,
                 client: Optional[BoardClient],
                 controller: Optional[InteractionController] = None,
                 debounce_ms: int = SAVE_DEBOUNCE_MS,
                 saved_status_ms: int = SAVED_STATUS_MS,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self.board = board
        self.client = client
        self.controller = controller
        self._status = SaveStatus.IDLE

        self._workers: list[ServiceCall] = []
        self._save_in_flight = False
        self._resave = False
        self._changed_since_load = False
        self._closing = False

        self._debounce = QTimer(self)
        self._debounce.setSingleShot(True)
        self._debounce.setInterval(debounce_ms)
        self._debounce.timeout.connect(self.flush)

        self._saved_timer = QTimer(self)
        self._saved_timer.setSingleShot(True)
        self._saved_timer.setInterval(saved_status_ms)
        self._saved_timer.timeout.connect(self._on_saved_timeout)

        if controller is not None:
            controller.boardChanged.connect(self.schedule_save)

    @property
    def status(self) -> SaveStatus:
        return self._status

    @property
    def enabled(self) -> bool:
        return self.client is not None

    @property
    def save_pending(self) -> bool:
        return self._debounce.isActive() or self._resave

    @property
    def busy(self) -> bool:
        """True while a service call is running."""
        return bool(self._workers)

    def _set_status(self, status: SaveStatus):
        if status != self._status:
            self._status = status
            self.statusChanged.emit(status)

    # ---- workers --------------------------------------------------------

    def _start(self, call: Callable[[], Any], on_success, on_failure) -> ServiceCall:
        worker = ServiceCall(call, self)
        worker.succeeded.connect(on_success)
        worker.failed.connect(on_failure)
        worker.finished.connect(self._on_worker_finished)
        self._workers.append(worker)
        worker.start()
        return worker

    def _on_worker_finished(self):
        worker = self.sender()
        if worker in self._workers:
            self._workers.remove(worker)
            worker.deleteLater()

    def wait_for_pending(self, timeout_ms: int = WAIT_TIMEOUT_MS) -> bool:
        """
        Block until every running service call has reported back.

        Returns:
            False if the timeout expired first
        """
        timer = QElapsedTimer()
        timer.start()
        while self._workers:
            remaining = timeout_ms - timer.elapsed()
            if remaining <= 0:
                return False
            self._workers[0].wait(int(remaining))
            QCoreApplication.processEvents()
        return True

    # ---- load -----------------------------------------------------------

    def load_board(self) -> bool:
        """
        Fetch the stored snapshot in the background.

        When it arrives it replaces the local board, unless the board was
        edited in the meantime. Malformed data or an unreachable service
        leaves the board as it is.

        Returns:
            True if the request was started
        """
        if self.client is None:
            return False
        self._changed_since_load = False
        self._start(self.client.load, self._on_load_succeeded, self._on_load_failed)
        return True

    def _on_load_succeeded(self, data):
        if self._changed_since_load:
            logger.info("Board was edited before the stored copy arrived, keeping local board")
            return

        if not self.board.load_snapshot(data):
            logger.warning("Stored board is malformed, starting empty")
            return

        if self.controller is not None:
            self.controller.replace_board_contents()
        logger.info(
            f"Loaded board with {len(self.board.elements)} elements, "
            f"{len(self.board.connectors)} connectors"
        )
        self.boardLoaded.emit()

    def _on_load_failed(self, message: str):
        logger.warning(f"Could not load board: {message}")

    # ---- save -----------------------------------------------------------

    def schedule_save(self):
        """Start or restart the debounce window."""
        self._changed_since_load = True
        if self.client is None or self._closing:
            return
        self._saved_timer.stop()
        self._set_status(SaveStatus.SAVING)
        self._debounce.start()

    def flush(self) -> bool:
        """
        Push the snapshot now, cancelling any pending debounce.

        Returns:
            True if a save was started or queued behind the running one
        """
        self._debounce.stop()
        if self.client is None or self._closing:
            return False

        if self._save_in_flight:
            self._resave = True
            return True

        snapshot = self.board.to_dict()
        self._save_in_flight = True
        self._set_status(SaveStatus.SAVING)
        self._start(lambda: self.client.save(snapshot),
                    self._on_save_succeeded, self._on_save_failed)
        return True

    def _on_save_succeeded(self, _record):
        self._save_in_flight = False
        if self._resave_if_needed():
            return
        if self._debounce.isActive():
            return
        self._set_status(SaveStatus.SAVED)
        self._saved_timer.start()

    def _on_save_failed(self, message: str):
        self._save_in_flight = False
        logger.warning(f"Could not save board: {message}")
        if self._resave_if_needed():
            return
        if not self._debounce.isActive():
            self._set_status(SaveStatus.IDLE)

    def _resave_if_needed(self) -> bool:
        if not self._resave or self._closing:
            return False
        self._resave = False
        self.flush()
        return True

    def _on_saved_timeout(self):
        if self._status == SaveStatus.SAVED:
            self._set_status(SaveStatus.IDLE)

    # ---- delete ---------------------------------------------------------

    def delete_board(self) -> bool:
        """
        Remove the stored board for this session in the background.

        ``boardDeleted`` reports the outcome.
        """
        if self.client is None:
            return False
        self._debounce.stop()
        self._resave = False
        self._set_status(SaveStatus.IDLE)
        self._start(self.client.delete, self._on_delete_succeeded, self._on_delete_failed)
        return True

    def _on_delete_succeeded(self, ok):
        self.boardDeleted.emit(bool(ok))

    def _on_delete_failed(self, message: str):
        logger.warning(f"Could not delete board: {message}")
        self.boardDeleted.emit(False)

    def shutdown(self):
        """
        Finish outstanding work before the application exits.

        Running calls are awaited; a save still waiting on the debounce is
        sent synchronously.
        """
        pending = self.save_pending
        self._debounce.stop()
        self._saved_timer.stop()
        self._resave = False
        self._closing = True

        if not self.wait_for_pending():
            logger.warning("Board service calls still running at shutdown")

        if pending and self.client is not None:
            try:
                self.client.save(self.board.to_dict())
            except BoardServiceError as e:
                logger.warning(f"Could not save board: {e}")
