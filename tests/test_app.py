MEMBERS = [
    {"id": "a", "name": "Alice"},
    {"id": "b", "name": "Bob"},
    {"id": "c", "name": "Carol"},
]


def _post(client, path, payload):
    return client.post(path, json=payload)


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_list_currencies(client):
    currencies = client.get("/api/currencies").get_json()

    assert len(currencies) == 10
    assert currencies[0] == {"code": "EUR", "name": "Euro", "symbol": "€"}


def test_group_balances(client):
    payload = {
        "members": MEMBERS,
        "expenses": [
            {"amount": 60, "paid_by": "a", "split_between": ["a", "b", "c"], "category": "Food"},
            {"amount": "30.00", "paid_by": "b", "split_between": [{"member_id": "b"}, {"member_id": "c"}]},
        ],
    }

    response = _post(client, "/api/balances", payload)
    data = response.get_json()

    assert response.status_code == 200
    assert data["currency"] == "EUR"
    assert [row["net_balance"] for row in data["balances"]] == [40.0, -5.0, -35.0]
    assert [(s["from_id"], s["to_id"], s["amount"]) for s in data["settlements"]] == [
        ("c", "a", 35.0),
        ("b", "a", 5.0),
    ]
    assert data["settlements"][0]["description"] == "Carol owes €35.00 to Alice"
    assert data["stats"] == {"total_transactions": 2, "total_amount": 40.0, "max_transaction": 35.0}
    assert data["total_expenses"] == 90.0
    assert data["spending_by_category"] == {"food": 60.0, "other": 30.0}


def test_group_balances_with_custom_shares(client):
    payload = {
        "members": MEMBERS,
        "expenses": [
            {
                "amount": 90,
                "paid_by": "a",
                "split_between": [
                    {"member_id": "a", "amount": 10},
                    {"member_id": "b", "amount": 30},
                    {"member_id": "c", "amount": 50},
                ],
            }
        ],
    }

    data = _post(client, "/api/balances", payload).get_json()

    assert [row["net_balance"] for row in data["balances"]] == [80.0, -30.0, -50.0]


def test_expense_in_other_currency_is_converted(client):
    payload = {
        "currency": "EUR",
        "members": MEMBERS[:2],
        "expenses": [{"amount": 108, "currency": "USD", "paid_by": "a", "split_between": ["a", "b"]}],
    }

    data = _post(client, "/api/balances", payload).get_json()

    assert [row["net_balance"] for row in data["balances"]] == [50.0, -50.0]
    assert data["total_expenses"] == 100.0


def test_empty_group(client):
    data = _post(client, "/api/balances", {"members": [], "expenses": []}).get_json()

    assert data["balances"] == []
    assert data["settlements"] == []
    assert data["stats"]["total_transactions"] == 0


def test_split_with_non_member_is_rejected(client):
    payload = {
        "members": MEMBERS,
        "expenses": [{"amount": 20, "paid_by": "a", "split_between": ["a", "z"]}],
    }

    response = _post(client, "/api/balances", payload)

    assert response.status_code == 400
    assert response.get_json() == {"error": "invalid_split_members"}


def test_payload_errors(client):
    cases = [
        ({"expenses": []}, "missing_fields"),
        ({"members": [{"id": "a"}], "expenses": []}, "invalid_member_payload"),
        ({"members": [MEMBERS[0], MEMBERS[0]], "expenses": []}, "duplicate_member"),
        ({"members": MEMBERS, "expenses": [{"amount": -5, "paid_by": "a", "split_between": ["a"]}]}, "invalid_amount"),
        ({"members": MEMBERS, "expenses": [{"amount": "abc", "paid_by": "a", "split_between": ["a"]}]}, "invalid_amount"),
        ({"members": MEMBERS, "expenses": [{"amount": 5, "paid_by": "x", "split_between": ["a"]}]}, "payer_not_in_group"),
        ({"members": MEMBERS, "expenses": [{"amount": 5, "paid_by": "a", "split_between": []}]}, "missing_fields"),
        (
            {"members": MEMBERS, "expenses": [{"amount": 5, "paid_by": "a", "split_between": ["a", "a"]}]},
            "duplicate_share_entry",
        ),
        (
            {
                "members": MEMBERS,
                "expenses": [
                    {"amount": 60, "paid_by": "a", "split_between": [{"member_id": "b", "amount": 30}, "c", "a"]}
                ],
            },
            "share_total_mismatch",
        ),
        (
            {
                "members": MEMBERS,
                "expenses": [{"amount": 10, "paid_by": "a", "split_between": [{"member_id": "b", "amount": 0}]}],
            },
            "invalid_share_amount",
        ),
        ({"currency": "XYZ", "members": MEMBERS, "expenses": []}, "unsupported_currency"),
        ({"members": MEMBERS, "expenses": 5}, "missing_fields"),
        ({"locale": ["fr"], "members": MEMBERS, "expenses": []}, "invalid_locale"),
        ({"members": MEMBERS, "expenses": [{"amount": 1e30, "paid_by": "a", "split_between": ["a"]}]}, "invalid_amount"),
        (
            {
                "members": MEMBERS,
                "expenses": [{"amount": 10, "paid_by": "a", "split_between": [{"member_id": "a", "amount": 1e30}]}],
            },
            "invalid_share_payload",
        ),
        (
            {"members": MEMBERS, "expenses": [{"amount": 5, "paid_by": "a", "split_between": ["a"], "category": 5}]},
            "invalid_category",
        ),
        (
            {"members": MEMBERS, "expenses": [{"amount": 5, "paid_by": "a", "split_between": ["a"], "category": ["x"]}]},
            "invalid_category",
        ),
        (
            {"members": MEMBERS, "expenses": [{"amount": 5, "paid_by": "a", "split_between": ["a"], "category": "yachts"}]},
            "invalid_category",
        ),
    ]

    for payload, error in cases:
        response = _post(client, "/api/balances", payload)
        assert response.status_code == 400, payload
        assert response.get_json() == {"error": error}, payload


def test_malformed_json(client):
    response = client.post("/api/balances", data="{not json", content_type="application/json")

    assert response.status_code == 400
    assert response.get_json() == {"error": "invalid_json"}


def test_settle_balances(client):
    payload = {
        "locale": "fr-FR",
        "balances": [
            {"member_id": "a", "name": "Alice", "balance": 15},
            {"member_id": "b", "name": "Bob", "balance": -15},
        ],
    }

    data = _post(client, "/api/settlements", payload).get_json()

    assert data["settlements"] == [
        {
            "from_id": "b",
            "from_name": "Bob",
            "to_id": "a",
            "to_name": "Alice",
            "amount": 15.0,
            "description": "Bob owes 15,00\u00a0€ to Alice",
        }
    ]
    assert data["stats"]["total_amount"] == 15.0


def test_settle_balances_accepts_net_balance_rows(client):
    payload = {
        "currency": "usd",
        "balances": [
            {"member_id": "a", "name": "Alice", "net_balance": -10},
            {"member_id": "b", "name": "Bob", "net_balance": 0},
            {"member_id": "c", "name": "Carol", "net_balance": 10},
        ],
    }

    data = _post(client, "/api/settlements", payload).get_json()

    assert data["currency"] == "USD"
    assert [(s["from_id"], s["to_id"], s["description"]) for s in data["settlements"]] == [
        ("a", "c", "Alice owes $10.00 to Carol")
    ]


def test_settle_balances_rejects_bad_rows(client):
    response = _post(client, "/api/settlements", {"balances": [{"member_id": "a", "balance": "lots"}]})

    assert response.status_code == 400
    assert response.get_json() == {"error": "invalid_balance_payload"}


def test_settle_balances_rejects_bad_locale_and_huge_balance(client):
    rows = [{"member_id": "a", "balance": 15}, {"member_id": "b", "balance": -15}]

    response = _post(client, "/api/settlements", {"locale": ["fr"], "balances": rows})
    assert response.status_code == 400
    assert response.get_json() == {"error": "invalid_locale"}

    response = _post(client, "/api/settlements", {"balances": [{"member_id": "a", "balance": 1e30}]})
    assert response.status_code == 400
    assert response.get_json() == {"error": "invalid_balance_payload"}


def test_list_categories(client):
    categories = client.get("/api/categories").get_json()

    assert len(categories) == 12
    assert categories[0]["id"] == "food"
    assert categories[-1]["id"] == "other"
