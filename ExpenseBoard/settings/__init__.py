"""
Settings package: configuration API and localization helpers.

This package provides:

- :mod:`ExpenseBoard.settings.lib` – Settings management, schema validation and api url resolution.
- :mod:`ExpenseBoard.settings.locale` – Localization utilities for currency, date and month formatting.
"""
