"""
Data models for settleup
"""
from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Member:
    """Group member"""
    id: str
    name: str


@dataclass(frozen=True)
class SplitShare:
    """One entry of an expense split; amount None means an equal share"""
    member_id: str
    amount: Optional[Decimal] = None


@dataclass(frozen=True)
class Expense:
    """Single shared expense"""
    id: str
    group_id: str
    amount: Decimal
    paid_by: str
    split_between: List[SplitShare]
    description: str = ""
    category: Optional[str] = None
    currency: str = "EUR"


@dataclass(frozen=True)
class Balance:
    """Net position of one member: > 0 is owed money, < 0 owes money"""
    member_id: str
    member_name: str
    balance: Decimal
    currency: str = "EUR"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "member_id": self.member_id,
            "name": self.member_name,
            "net_balance": float(self.balance),
            "currency": self.currency,
        }


@dataclass(frozen=True)
class Transaction:
    """Recommended payment from a debtor to a creditor"""
    from_id: str
    to_id: str
    amount: Decimal
    from_name: str
    to_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from_id": self.from_id,
            "from_name": self.from_name,
            "to_id": self.to_id,
            "to_name": self.to_name,
            "amount": float(self.amount),
        }


@dataclass(frozen=True)
class OptimizationStats:
    total_transactions: int
    total_amount: Decimal
    max_transaction: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_transactions": self.total_transactions,
            "total_amount": float(self.total_amount),
            "max_transaction": float(self.max_transaction),
        }
