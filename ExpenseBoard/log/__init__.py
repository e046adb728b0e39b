"""
Logging subsystem: handlers and views for application logging.

Modules:

- :mod:`ExpenseBoard.log.log` – Log handler integrating with Python logging.
- :mod:`ExpenseBoard.log.view` – Dialog for rendering and filtering in-memory log messages.
"""
