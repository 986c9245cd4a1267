"""
Fixed catalog of expense categories.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class ExpenseCategory:
    id: str
    name: str
    icon: str
    color: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name, "icon": self.icon, "color": self.color}


# Expenses logged without a category are counted here.
DEFAULT_CATEGORY = "other"

EXPENSE_CATEGORIES: List[ExpenseCategory] = [
    ExpenseCategory("food", "Food & Restaurants", "🍽️", "#f59e0b"),
    ExpenseCategory("transport", "Transport", "🚗", "#3b82f6"),
    ExpenseCategory("accommodation", "Accommodation", "🏠", "#10b981"),
    ExpenseCategory("entertainment", "Entertainment", "🎬", "#8b5cf6"),
    ExpenseCategory("shopping", "Shopping", "🛍️", "#ec4899"),
    ExpenseCategory("health", "Health & Pharmacy", "💊", "#ef4444"),
    ExpenseCategory("utilities", "Utilities & Bills", "⚡", "#6b7280"),
    ExpenseCategory("education", "Education", "📚", "#0ea5e9"),
    ExpenseCategory("gifts", "Gifts", "🎁", "#f97316"),
    ExpenseCategory("sports", "Sports & Fitness", "⚽", "#22c55e"),
    ExpenseCategory("travel", "Travel", "✈️", "#06b6d4"),
    ExpenseCategory(DEFAULT_CATEGORY, "Other", "📝", "#64748b"),
]

_BY_ID = {category.id: category for category in EXPENSE_CATEGORIES}


def get_category_by_id(category_id: str) -> Optional[ExpenseCategory]:
    return _BY_ID.get(category_id)
