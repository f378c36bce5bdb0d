import shutil
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from cardwise.api.app import create_app
from cardwise.repository.card_store import CardStore

SAMPLE_DATA = Path(__file__).resolve().parents[1] / "data" / "cards" / "sample_cards.json"
AS_OF = "2026-10-18T12:00:00"


@pytest.fixture
def client(tmp_path: Path) -> TestClient:
    data_file = tmp_path / "cards.json"
    shutil.copy(SAMPLE_DATA, data_file)
    return TestClient(create_app(store=CardStore(data_file)))


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["cache"]["cached"] == 0


def test_recommend(client: TestClient) -> None:
    response = client.post("/recommend", json={"message": "buying groceries", "as_of": AS_OF})

    assert response.status_code == 200
    body = response.json()
    assert body["augmented"] is False
    assert body["recommendation"]["primary"]["card_id"] == "amex-gold"
    assert body["recommendation"]["primary"]["remaining"] == 20800
    assert body["recommendation"]["secondary"]["card_id"] == "chase-freedom"
    assert body["text"].startswith("Based on your groceries purchase")


def test_recommend_with_augmenter(client: TestClient) -> None:
    response = client.post(
        "/recommend", json={"message": "buying groceries", "augment": True, "as_of": AS_OF}
    )

    assert response.status_code == 200
    assert response.json()["augmented"] is True
    assert "Amex Gold: Groceries earns 4.0x MR" in response.json()["text"]


def test_recommend_rejects_invalid_query(client: TestClient) -> None:
    response = client.post("/recommend", json={"message": "  "})

    assert response.status_code == 400
    assert response.json()["detail"] == "Query cannot be empty"


def test_recommend_without_cards(tmp_path: Path) -> None:
    data_file = tmp_path / "empty.json"
    data_file.write_text('{"cards": [], "preferences": {}}')
    client = TestClient(create_app(store=CardStore(data_file)))

    response = client.post("/recommend", json={"message": "buying groceries"})

    assert response.status_code == 404


def test_parse(client: TestClient) -> None:
    response = client.post("/parse", json={"message": "$40 of gas at shell"})

    assert response.status_code == 200
    body = response.json()
    assert body["category"] == "Gas"
    assert body["merchant"] == "shell"
    assert body["amount"] == 40.0


def test_list_cards(client: TestClient) -> None:
    response = client.get("/cards")

    assert response.status_code == 200
    assert len(response.json()) == 4


def test_card_limit_status(client: TestClient) -> None:
    response = client.get("/cards/amex-gold/limits", params={"category": "groceries", "as_of": AS_OF})

    assert response.status_code == 200
    assert response.json() == {
        "card_id": "amex-gold",
        "category": "Groceries",
        "status": "available",
        "usage_ratio": pytest.approx(0.168),
        "remaining": 20800.0,
        "next_reset_date": "2027-01-01",
    }


def test_card_limit_status_errors(client: TestClient) -> None:
    assert client.get("/cards/amex-gold/limits", params={"category": "spaceships"}).status_code == 400
    assert client.get("/cards/missing/limits", params={"category": "Gas"}).status_code == 404


def test_spending_update_raises_alert(client: TestClient) -> None:
    response = client.post(
        "/spending",
        json={"card_id": "amex-gold", "category": "Groceries", "amount": 18000, "as_of": AS_OF},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["card"]["spending_limits"][0]["current_spending"] == 22200
    assert [alert["status"] for alert in body["alerts"]] == ["warning"]


def test_spending_set_mode(client: TestClient) -> None:
    response = client.post(
        "/spending",
        json={"card_id": "amex-gold", "category": "Groceries", "amount": 100, "mode": "set"},
    )

    assert response.status_code == 200
    assert response.json()["alerts"] == []


def test_spending_unknown_card(client: TestClient) -> None:
    response = client.post("/spending", json={"card_id": "missing", "category": "Gas", "amount": 10})

    assert response.status_code == 404
