"""
UI package: application actions, main application setup, theming, and widgets.

This package provides:

- :mod:`ExpenseBoard.ui.actions` – Application-wide Qt signals, routes and utility slots.
- :mod:`ExpenseBoard.ui.app` – QApplication subclass and platform setup functions.
- :mod:`ExpenseBoard.ui.main` – Main window composition and page routing.
- :mod:`ExpenseBoard.ui.toolbar` – Navigation toolbar.
- :mod:`ExpenseBoard.ui.ui` – Styling constants for fonts, sizes, and colors, and shared widgets.
- :mod:`ExpenseBoard.ui.yearmonth` – Filter combo boxes for categories and year-months.
- :mod:`ExpenseBoard.ui.basechart` – Base chart widget class (:class:`ExpenseBoard.ui.basechart.BaseChartView`).
"""
