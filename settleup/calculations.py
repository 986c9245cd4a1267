"""
Balance computation and debt simplification for a group's expense ledger.

Everything here is a pure function of its arguments: balances and suggested
transactions are derived views, recomputed on every call.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .categories import DEFAULT_CATEGORY
from .currencies import CurrencyService
from .models import Balance, Expense, Member, OptimizationStats, Transaction
from .money import EPSILON, ZERO, round_money, to_decimal

logger = logging.getLogger(__name__)

# (member_id, balance) pairs, ordered as the simplifier scans them
BalanceRows = List[Tuple[str, Decimal]]


def calculate_balances(
    members: Sequence[Member],
    expenses: Iterable[Expense],
    currency: str = "EUR",
) -> List[Balance]:
    """
    Net balance per member: what they paid minus their share of what was spent.

    Entries naming someone outside `members` are dropped with a warning, so the
    result only covers the roster it was given.
    """
    totals: Dict[str, Decimal] = {member.id: Decimal("0") for member in members}

    for expense in expenses:
        amount = to_decimal(expense.amount)

        if expense.paid_by in totals:
            totals[expense.paid_by] += amount
        else:
            logger.warning("Expense %s paid by unknown member %s, credit dropped", expense.id, expense.paid_by)

        if not expense.split_between:
            continue
        equal_share = amount / len(expense.split_between)
        for split in expense.split_between:
            share = equal_share if split.amount is None else to_decimal(split.amount)
            if split.member_id in totals:
                totals[split.member_id] -= share
            else:
                logger.warning("Expense %s split with unknown member %s, share dropped", expense.id, split.member_id)

    return [
        Balance(
            member_id=member.id,
            member_name=member.name,
            balance=round_money(totals[member.id]),
            currency=currency,
        )
        for member in members
    ]


def simplify_debts(balances: Sequence[Balance]) -> List[Transaction]:
    """
    Suggest payments that bring every balance to zero, using as few as possible.

    Each round picks one payment (see `_find_optimal_transaction`), applies it
    to a working copy of the balances and starts over, until no one is left
    owing or owed more than one cent.
    """
    working: Dict[str, Decimal] = {}
    names: Dict[str, str] = {}
    for entry in balances:
        working[entry.member_id] = to_decimal(entry.balance)
        names[entry.member_id] = entry.member_name

    transactions: List[Transaction] = []
    while True:
        creditors = sorted(
            ((member_id, amount) for member_id, amount in working.items() if amount > EPSILON),
            key=lambda item: item[1],
            reverse=True,
        )
        debtors = sorted(
            ((member_id, amount) for member_id, amount in working.items() if amount < -EPSILON),
            key=lambda item: item[1],
        )
        if not creditors or not debtors:
            break

        found = _find_optimal_transaction(creditors, debtors, working)
        if found is None:
            break

        debtor_id, creditor_id, amount = found
        amount = round_money(amount)
        transactions.append(
            Transaction(
                from_id=debtor_id,
                to_id=creditor_id,
                amount=amount,
                from_name=names[debtor_id],
                to_name=names[creditor_id],
            )
        )
        logger.debug("Round %d: %s pays %s %s", len(transactions), debtor_id, creditor_id, amount)

        working[creditor_id] = round_money(working[creditor_id] - amount)
        working[debtor_id] = round_money(working[debtor_id] + amount)

    leftover = [member_id for member_id, amount in working.items() if abs(amount) > EPSILON]
    if leftover:
        logger.warning("Unsettled balances left after simplification: %s", ", ".join(leftover))

    return transactions


def _find_optimal_transaction(
    creditors: BalanceRows,
    debtors: BalanceRows,
    working: Dict[str, Decimal],
) -> Optional[Tuple[str, str, Decimal]]:
    """Return (debtor_id, creditor_id, amount) for the next payment, or None."""
    # Prefer a payment that takes someone out of the picture entirely.
    # Pairs are scanned creditor-major and the first match wins.
    for creditor_id, credit in creditors:
        for debtor_id, debt in debtors:
            transfer = min(credit, -debt)
            if transfer <= EPSILON:
                continue
            settles_creditor = abs(credit - transfer) <= EPSILON
            settles_debtor = abs(debt + transfer) <= EPSILON
            if settles_creditor or settles_debtor:
                return debtor_id, creditor_id, transfer

    chain = _find_debt_chain(creditors, debtors, working)
    if chain is not None:
        return chain

    creditor_id, credit = creditors[0]
    debtor_id, debt = debtors[0]
    transfer = min(credit, -debt)
    if transfer > EPSILON:
        return debtor_id, creditor_id, transfer
    return None


def _find_debt_chain(
    creditors: BalanceRows,
    debtors: BalanceRows,
    working: Dict[str, Decimal],
) -> Optional[Tuple[str, str, Decimal]]:
    """
    Collapse A -> B -> C into A -> C for a member B listed as both creditor
    and debtor.
    """
    creditor_ids = {member_id for member_id, _ in creditors}
    debtor_ids = {member_id for member_id, _ in debtors}

    for intermediate_id, intermediate_balance in working.items():
        if intermediate_id not in creditor_ids or intermediate_id not in debtor_ids:
            continue
        for debtor_id, debt in debtors:
            if debtor_id == intermediate_id:
                continue
            for creditor_id, credit in creditors:
                if creditor_id == intermediate_id:
                    continue
                transfer = min(abs(debt), abs(intermediate_balance), credit)
                if transfer > EPSILON:
                    return debtor_id, creditor_id, transfer
    return None


def format_transaction_description(
    transaction: Transaction,
    currency: str = "EUR",
    locale: Optional[str] = None,
    currency_service: Optional[CurrencyService] = None,
) -> str:
    service = currency_service or CurrencyService()
    amount = service.format_currency(transaction.amount, currency, locale)
    return f"{transaction.from_name} owes {amount} to {transaction.to_name}"


def get_optimization_stats(balances: Sequence[Balance]) -> OptimizationStats:
    transactions = simplify_debts(balances)
    return OptimizationStats(
        total_transactions=len(transactions),
        total_amount=sum((t.amount for t in transactions), ZERO),
        max_transaction=max((t.amount for t in transactions), default=ZERO),
    )


def get_total_expenses(expenses: Iterable[Expense]) -> Decimal:
    return sum((to_decimal(expense.amount) for expense in expenses), ZERO)


def get_member_expenses(expenses: Iterable[Expense], member_id: str) -> Decimal:
    """Total amount paid by one member."""
    return sum(
        (to_decimal(expense.amount) for expense in expenses if expense.paid_by == member_id),
        ZERO,
    )


def get_spending_by_category(expenses: Iterable[Expense]) -> Dict[str, Decimal]:
    spending: Dict[str, Decimal] = {}
    for expense in expenses:
        category = expense.category or DEFAULT_CATEGORY
        spending[category] = spending.get(category, ZERO) + to_decimal(expense.amount)
    return spending
