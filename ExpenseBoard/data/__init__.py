"""
ExpenseBoard data package: records, analytics, models, and views.

This package provides:

- :mod:`ExpenseBoard.data.schema` – Expense records and the server summary types.
- :mod:`ExpenseBoard.data.data` – Dashboard statistics, list filtering and chart frames (:func:`ExpenseBoard.data.data.get_dashboard_stats`, :func:`ExpenseBoard.data.data.filter_expenses`).
- :mod:`ExpenseBoard.data.query` – Analytics queries guarded against stale responses.
- :mod:`ExpenseBoard.data.model` – Qt table models for expenses and category summaries.
- :mod:`ExpenseBoard.data.view` – The dashboard, form, list and analytics pages and their charts.
"""
