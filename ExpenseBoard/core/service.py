"""Background execution of blocking api calls.

Provides a QThread based worker that runs a blocking function once and reports its result
or the raised exception back to the GUI thread.
"""

import logging
from typing import Any, Callable, Optional, Set

from PySide6 import QtCore

from ..status import status

# Workers are kept alive here until they finish
_workers: Set['AsyncWorker'] = set()


class AsyncWorker(QtCore.QThread):
    """
    Generic worker thread for blocking functions.

    Status exceptions and request errors are not retried: the exception is passed on
    to the caller through `errorOccurred`.

    Signals:
        resultReady (object): Emitted with the function's result on success.
        errorOccurred (object): Emitted with the raised exception on failure.
    """
    resultReady = QtCore.Signal(object)
    errorOccurred = QtCore.Signal(object)

    def __init__(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        super().__init__()
        self.func = func
        self.args = args
        self.kwargs = kwargs

    def run(self) -> None:
        try:
            result = self.func(*self.args, **self.kwargs)
        except status.BaseStatusException as ex:
            self.errorOccurred.emit(ex)
            return
        except Exception as ex:
            logging.exception(f'Unexpected error in worker running {self.func.__name__}: {ex}')
            self.errorOccurred.emit(ex)
            return
        self.resultReady.emit(result)


def run_async(
        func: Callable[..., Any],
        *args: Any,
        on_result: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        **kwargs: Any
) -> AsyncWorker:
    """
    Runs `func` on a worker thread.

    The callbacks are invoked on the thread of the caller through queued connections.

    Args:
        func: The blocking function to run.
        *args: Positional arguments passed to `func`.
        on_result: Called with the return value of `func`.
        on_error: Called with the exception raised by `func`.
        **kwargs: Keyword arguments passed to `func`.

    Returns:
        AsyncWorker: The started worker.
    """
    worker = AsyncWorker(func, *args, **kwargs)
    if on_result is not None:
        worker.resultReady.connect(on_result, QtCore.Qt.QueuedConnection)
    if on_error is not None:
        worker.errorOccurred.connect(on_error, QtCore.Qt.QueuedConnection)

    _workers.add(worker)

    @QtCore.Slot()
    def finished() -> None:
        _workers.discard(worker)
        worker.deleteLater()

    worker.finished.connect(finished, QtCore.Qt.QueuedConnection)

    logging.debug(f'Starting worker for {func.__name__}')
    worker.start()
    return worker


def wait_for_workers(timeout_ms: int = 5000) -> None:
    """
    Blocks until every running worker has finished.

    Args:
        timeout_ms (int): Maximum time to wait per worker.
    """
    for worker in list(_workers):
        worker.wait(timeout_ms)
