"""Shared-expense balances and debt simplification."""
from .calculations import (
    calculate_balances,
    format_transaction_description,
    get_member_expenses,
    get_optimization_stats,
    get_spending_by_category,
    get_total_expenses,
    simplify_debts,
)
from .categories import EXPENSE_CATEGORIES, ExpenseCategory, get_category_by_id
from .currencies import SUPPORTED_CURRENCIES, Currency, CurrencyService
from .models import Balance, Expense, Member, OptimizationStats, SplitShare, Transaction

__all__ = [
    "Balance",
    "Currency",
    "CurrencyService",
    "EXPENSE_CATEGORIES",
    "Expense",
    "ExpenseCategory",
    "Member",
    "OptimizationStats",
    "SUPPORTED_CURRENCIES",
    "SplitShare",
    "Transaction",
    "calculate_balances",
    "format_transaction_description",
    "get_category_by_id",
    "get_member_expenses",
    "get_optimization_stats",
    "get_spending_by_category",
    "get_total_expenses",
    "simplify_debts",
]
