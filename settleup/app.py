from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Set

from flask import Flask, current_app, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import BadRequest

from .calculations import (
    calculate_balances,
    format_transaction_description,
    get_optimization_stats,
    get_spending_by_category,
    get_total_expenses,
    simplify_debts,
)
from .categories import EXPENSE_CATEGORIES, get_category_by_id
from .config import config
from .currencies import CurrencyService
from .models import Balance, Expense, Member, SplitShare, Transaction
from .money import amounts_close, to_decimal

logger = logging.getLogger(__name__)


def create_app(config_object=None) -> Flask:
    settings = config_object or config

    logging.basicConfig(level=settings.LOG_LEVEL)

    app = Flask(__name__)
    app.config["DEFAULT_CURRENCY"] = settings.DEFAULT_CURRENCY
    app.config["DEFAULT_LOCALE"] = settings.DEFAULT_LOCALE

    CORS(
        app,
        resources={r"/api/*": {"origins": settings.CORS_ORIGINS}},
    )

    app.extensions["currency_service"] = CurrencyService(default_locale=settings.DEFAULT_LOCALE)

    register_routes(app)
    return app


def register_routes(app: Flask) -> None:
    @app.errorhandler(BadRequest)
    def handle_bad_request(exc: BadRequest):
        return jsonify({"error": "invalid_json"}), 400

    @app.get("/api/health")
    def health_check():
        return jsonify({"status": "ok"})

    @app.get("/api/currencies")
    def list_currencies():
        service = _currency_service()
        return jsonify([currency.to_dict() for currency in service.list_currencies()])

    @app.get("/api/categories")
    def list_categories():
        return jsonify([category.to_dict() for category in EXPENSE_CATEGORIES])

    @app.post("/api/balances")
    def group_balances():
        payload = request.get_json(force=True)
        if not isinstance(payload, dict):
            return jsonify({"error": "missing_fields"}), 400

        service = _currency_service()
        try:
            currency = _resolve_currency(payload.get("currency"), service)
            members = _normalize_members(payload.get("members"))
            locale = _resolve_locale(payload.get("locale"))
            member_ids = {member.id for member in members}
            expenses_payload = payload.get("expenses")
            if expenses_payload is None:
                expenses_payload = []
            if not isinstance(expenses_payload, list):
                raise ValueError("missing_fields")
            expenses = [
                _normalize_expense(item, index, member_ids, currency, service, payload.get("group_id"))
                for index, item in enumerate(expenses_payload)
            ]
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400

        balances = calculate_balances(members, expenses, currency)
        transactions = simplify_debts(balances)
        logger.info(
            "Computed %d settlements for %d members and %d expenses",
            len(transactions),
            len(members),
            len(expenses),
        )

        return jsonify(
            {
                "currency": currency,
                "balances": [balance.to_dict() for balance in balances],
                "settlements": _settlement_rows(transactions, currency, locale, service),
                "stats": get_optimization_stats(balances).to_dict(),
                "total_expenses": float(get_total_expenses(expenses)),
                "spending_by_category": {
                    category: float(total) for category, total in get_spending_by_category(expenses).items()
                },
            }
        )

    @app.post("/api/settlements")
    def settle_balances():
        payload = request.get_json(force=True)
        if not isinstance(payload, dict):
            return jsonify({"error": "missing_fields"}), 400

        service = _currency_service()
        try:
            currency = _resolve_currency(payload.get("currency"), service)
            locale = _resolve_locale(payload.get("locale"))
            balances = _normalize_balances(payload.get("balances"), currency)
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400

        transactions = simplify_debts(balances)
        return jsonify(
            {
                "currency": currency,
                "settlements": _settlement_rows(transactions, currency, locale, service),
                "stats": get_optimization_stats(balances).to_dict(),
            }
        )


def _currency_service() -> CurrencyService:
    return current_app.extensions["currency_service"]


def _resolve_currency(code: Any, service: CurrencyService) -> str:
    if code is None:
        return current_app.config["DEFAULT_CURRENCY"]
    code = str(code).strip().upper()
    if not service.is_supported(code):
        raise ValueError("unsupported_currency")
    return code


def _resolve_locale(locale: Any) -> Optional[str]:
    if locale is None:
        return None
    if not isinstance(locale, str):
        raise ValueError("invalid_locale")
    return locale.strip() or None


def _settlement_rows(
    transactions: List[Transaction],
    currency: str,
    locale: Optional[str],
    service: CurrencyService,
) -> List[Dict[str, Any]]:
    rows = []
    for transaction in transactions:
        row = transaction.to_dict()
        row["description"] = format_transaction_description(transaction, currency, locale, service)
        rows.append(row)
    return rows


def _normalize_members(payload: Any) -> List[Member]:
    if not isinstance(payload, list):
        raise ValueError("missing_fields")

    members: List[Member] = []
    seen: Set[str] = set()
    for item in payload:
        try:
            member_id = str(item["id"]).strip()
            name = str(item["name"]).strip()
        except (KeyError, TypeError):
            raise ValueError("invalid_member_payload") from None

        if not member_id or not name:
            raise ValueError("invalid_member_payload")
        if member_id in seen:
            raise ValueError("duplicate_member")

        seen.add(member_id)
        members.append(Member(id=member_id, name=name))
    return members


def _normalize_expense(
    item: Any,
    index: int,
    member_ids: Set[str],
    group_currency: str,
    service: CurrencyService,
    group_id: Any = None,
) -> Expense:
    if not isinstance(item, dict):
        raise ValueError("missing_fields")

    amount = item.get("amount")
    paid_by = item.get("paid_by")
    split_payload = item.get("split_between") or []
    if amount is None or paid_by is None or not split_payload:
        raise ValueError("missing_fields")

    try:
        amount_decimal = to_decimal(amount)
    except ValueError:
        raise ValueError("invalid_amount") from None
    if amount_decimal <= 0:
        raise ValueError("invalid_amount")

    paid_by = str(paid_by)
    if paid_by not in member_ids:
        raise ValueError("payer_not_in_group")

    shares = _normalize_shares(split_payload, member_ids)
    _check_share_total(shares, amount_decimal)

    expense_currency = _resolve_currency(item.get("currency") or group_currency, service)
    if expense_currency != group_currency:
        amount_decimal = service.convert_amount(amount_decimal, expense_currency, group_currency)
        shares = [
            SplitShare(
                member_id=share.member_id,
                amount=None if share.amount is None
                else service.convert_amount(share.amount, expense_currency, group_currency),
            )
            for share in shares
        ]

    return Expense(
        id=str(item.get("id") or index + 1),
        group_id="" if group_id is None else str(group_id),
        amount=amount_decimal,
        paid_by=paid_by,
        split_between=shares,
        description=str(item.get("description") or ""),
        category=_normalize_category(item.get("category")),
        currency=group_currency,
    )


def _normalize_category(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("invalid_category")
    category_id = value.strip().lower()
    if not category_id:
        return None
    if get_category_by_id(category_id) is None:
        raise ValueError("invalid_category")
    return category_id


def _normalize_shares(payload: Any, member_ids: Set[str]) -> List[SplitShare]:
    if not isinstance(payload, list):
        raise ValueError("invalid_share_payload")

    shares: List[SplitShare] = []
    seen: Set[str] = set()
    for item in payload:
        if isinstance(item, (str, int)) and not isinstance(item, bool):
            member_id, share_value = str(item), None
        else:
            try:
                member_id = str(item["member_id"])
                share_value = item.get("amount")
            except (KeyError, TypeError, AttributeError):
                raise ValueError("invalid_share_payload") from None

        share_amount: Optional[Decimal] = None
        if share_value is not None:
            try:
                share_amount = to_decimal(share_value)
            except ValueError:
                raise ValueError("invalid_share_payload") from None
            if share_amount <= 0:
                raise ValueError("invalid_share_amount")

        if member_id in seen:
            raise ValueError("duplicate_share_entry")
        if member_id not in member_ids:
            raise ValueError("invalid_split_members")

        seen.add(member_id)
        shares.append(SplitShare(member_id=member_id, amount=share_amount))
    return shares


def _check_share_total(shares: List[SplitShare], amount: Decimal) -> None:
    if all(share.amount is None for share in shares):
        return

    equal_share = amount / len(shares)
    share_total = sum((equal_share if share.amount is None else share.amount for share in shares), Decimal("0"))
    if not amounts_close(share_total, amount):
        raise ValueError("share_total_mismatch")


def _normalize_balances(payload: Any, currency: str) -> List[Balance]:
    if not isinstance(payload, list):
        raise ValueError("missing_fields")

    balances: List[Balance] = []
    for item in payload:
        try:
            member_id = str(item["member_id"])
            name = str(item.get("name") or member_id)
            balance = to_decimal(item.get("net_balance", item.get("balance")))
        except (KeyError, TypeError, ValueError, AttributeError):
            raise ValueError("invalid_balance_payload") from None
        balances.append(Balance(member_id=member_id, member_name=name, balance=balance, currency=currency))
    return balances


app = create_app()


if __name__ == "__main__":
    app.run(debug=True)
