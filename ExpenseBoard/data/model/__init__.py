"""Qt table models for the ExpenseBoard application.

This subpackage provides the expense list model (ExpensesModel) and the read-only
category summary model (CategorySummaryModel).
"""
