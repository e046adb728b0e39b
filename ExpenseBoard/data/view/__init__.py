"""Qt views for the ExpenseBoard application.

This subpackage provides the pages and the charts they draw:

- DashboardView: statistics, recent expenses and summary charts
- ExpenseFormView: form for recording a new expense
- ExpenseListView: filtered expense list with totals and deletion
- AnalyticsView: server summaries with a month filter
- PieChartView, BarChartView and TrendChartView: chart widgets
"""
