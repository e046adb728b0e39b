"""Expense store: the state container holding the expense collection.

The store is owned by the main window and handed to the views. It caches the collection
returned by the server and applies a mutation only after the server confirmed it.

Failures are never raised to the caller: the status exceptions raised by the api client
are logged and turned into a ``False`` result.
"""
import logging
from typing import Callable, List, Optional

from PySide6 import QtCore

from . import api, service
from ..data.schema import Expense, ExpenseDraft, ExpenseId
from ..status import status


class ExpenseStore(QtCore.QObject):
    """Holds the expense collection and exposes list/load/add/remove.

    Signals:
        expensesChanged (list): Emitted with a copy of the collection after every change.
        loadingChanged (bool): Emitted when a fetch starts or ends.
    """
    expensesChanged = QtCore.Signal(list)
    loadingChanged = QtCore.Signal(bool)

    def __init__(self, parent: Optional[QtCore.QObject] = None) -> None:
        super().__init__(parent=parent)
        self._expenses: List[Expense] = []
        self._loading: bool = False

    def list(self) -> List[Expense]:
        """Returns a copy of the cached collection, newest insertion first."""
        return list(self._expenses)

    def is_loading(self) -> bool:
        return self._loading

    def _set_loading(self, v: bool) -> None:
        if self._loading == v:
            return
        self._loading = v
        self.loadingChanged.emit(v)

    def _set_expenses(self, expenses: List[Expense]) -> None:
        self._expenses = expenses
        self.expensesChanged.emit(self.list())

    @staticmethod
    def _fetch() -> List[Expense]:
        return [Expense.from_dict(d) for d in api.fetch_expenses()]

    @staticmethod
    def _create(draft: ExpenseDraft) -> Expense:
        from ..settings import lib

        # Category and payment method must be in the configured sets
        draft.validate(lib.settings.get_section('categories'), lib.settings.get_section('payment_methods'))
        return Expense.from_dict(api.create_expense(draft.to_payload()))

    @staticmethod
    def _delete(expense_id: ExpenseId) -> ExpenseId:
        api.delete_expense(expense_id)
        return expense_id

    def _apply_loaded(self, expenses: List[Expense]) -> None:
        logging.debug(f'Loaded {len(expenses)} expenses.')
        self._set_expenses(list(expenses))

    def _apply_added(self, expense: Expense) -> None:
        logging.debug(f'Added expense {expense.id}.')
        self._set_expenses([expense] + self._expenses)

    def _apply_removed(self, expense_id: ExpenseId) -> None:
        expenses = [e for e in self._expenses if str(e.id) != str(expense_id)]
        if len(expenses) == len(self._expenses):
            logging.debug(f'Expense {expense_id} was not cached, nothing to remove.')
            return
        logging.debug(f'Removed expense {expense_id}.')
        self._set_expenses(expenses)

    def load(self) -> bool:
        """Fetches the collection and replaces the cache.

        Returns:
            bool: True on success.
        """
        self._set_loading(True)
        try:
            self._apply_loaded(self._fetch())
            return True
        except status.BaseStatusException as ex:
            logging.error(f'Error fetching expenses: {ex}')
            return False
        finally:
            self._set_loading(False)

    def add(self, draft: ExpenseDraft) -> bool:
        """Creates a new expense and prepends it to the cache.

        Args:
            draft (ExpenseDraft): The values of the new expense.

        Returns:
            bool: True on success.
        """
        try:
            self._apply_added(self._create(draft))
            return True
        except status.BaseStatusException as ex:
            logging.error(f'Error adding expense: {ex}')
            return False

    def remove(self, expense_id: ExpenseId) -> bool:
        """Deletes an expense and removes it from the cache.

        The server call is made even if the id is not cached.

        Args:
            expense_id: The id of the expense.

        Returns:
            bool: True on success.
        """
        try:
            self._apply_removed(self._delete(expense_id))
            return True
        except status.BaseStatusException as ex:
            logging.error(f'Error deleting expense: {ex}')
            return False

    def load_async(self, callback: Optional[Callable[[bool], None]] = None) -> None:
        """Fetches the collection on a worker thread.

        Args:
            callback: Called on the GUI thread with the success flag.
        """
        self._set_loading(True)

        def on_result(expenses: List[Expense]) -> None:
            self._apply_loaded(expenses)
            self._set_loading(False)
            if callback:
                callback(True)

        def on_error(ex: Exception) -> None:
            logging.error(f'Error fetching expenses: {ex}')
            self._set_loading(False)
            if callback:
                callback(False)

        service.run_async(self._fetch, on_result=on_result, on_error=on_error)

    def add_async(self, draft: ExpenseDraft, callback: Optional[Callable[[bool], None]] = None) -> None:
        """Creates a new expense on a worker thread.

        Args:
            draft (ExpenseDraft): The values of the new expense.
            callback: Called on the GUI thread with the success flag.
        """

        def on_result(expense: Expense) -> None:
            self._apply_added(expense)
            if callback:
                callback(True)

        def on_error(ex: Exception) -> None:
            logging.error(f'Error adding expense: {ex}')
            if callback:
                callback(False)

        service.run_async(self._create, draft, on_result=on_result, on_error=on_error)

    def remove_async(self, expense_id: ExpenseId, callback: Optional[Callable[[bool], None]] = None) -> None:
        """Deletes an expense on a worker thread.

        Args:
            expense_id: The id of the expense.
            callback: Called on the GUI thread with the success flag.
        """

        def on_result(removed_id: ExpenseId) -> None:
            self._apply_removed(removed_id)
            if callback:
                callback(True)

        def on_error(ex: Exception) -> None:
            logging.error(f'Error deleting expense: {ex}')
            if callback:
                callback(False)

        service.run_async(self._delete, expense_id, on_result=on_result, on_error=on_error)
