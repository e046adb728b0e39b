"""
Core package for ExpenseBoard providing the server integration.

This package includes:

- :mod:`ExpenseBoard.core.api` – HTTP client for the expense REST API.
- :mod:`ExpenseBoard.core.service` – Worker threads running blocking calls off the UI thread.
- :mod:`ExpenseBoard.core.store` – The cached expense collection and its list, add, remove and load operations.
"""
