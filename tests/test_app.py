import pytest

from cards import format_deck
from server.app import MAX_KEYSTREAM_COUNT, app

FACTORY_LABELS = format_deck(range(1, 29))


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as test_client:
        yield test_client


def test_encrypt_and_decrypt_round_trip(client):
    response = client.post(
        "/api/encrypt", json={"deck": FACTORY_LABELS, "message": "Attack at dawn"}
    )
    assert response.status_code == 200
    ciphertext = response.get_json()["ciphertext"]
    assert len(ciphertext) == 15

    response = client.post(
        "/api/decrypt", json={"deck": FACTORY_LABELS.split(), "ciphertext": ciphertext}
    )
    assert response.status_code == 200
    assert response.get_json()["plaintext"] == "ATTACKATDAWNXXX"


def test_encrypt_grouped_output(client):
    response = client.post(
        "/api/encrypt",
        json={"deck": FACTORY_LABELS, "message": "aaaaa aaaaa", "group": True},
    )
    assert response.status_code == 200
    ciphertext = response.get_json()["ciphertext"]
    assert ciphertext.startswith("IQL")
    assert len(ciphertext.split(" ")) == 2


def test_keystream_endpoint_returns_known_values(client):
    response = client.post("/api/keystream", json={"deck": FACTORY_LABELS, "count": 3})
    assert response.status_code == 200
    assert response.get_json() == {"keystream": [8, 16, 11]}


@pytest.mark.parametrize(
    "path,payload,fragment",
    [
        ("/api/encrypt", {"message": "hi"}, "Missing field: deck"),
        ("/api/encrypt", {"deck": FACTORY_LABELS}, "Missing field: message"),
        ("/api/encrypt", {"deck": FACTORY_LABELS, "message": 5}, "invalid type"),
        ("/api/encrypt", {"deck": "AC 2C", "message": "hi"}, "28 cards"),
        ("/api/encrypt", {"deck": "AC 2H", "message": "hi"}, "unknown suit"),
        ("/api/decrypt", {"deck": 12, "ciphertext": "ABC"}, "deck must be"),
        ("/api/decrypt", {"deck": FACTORY_LABELS}, "Missing field: ciphertext"),
        ("/api/keystream", {"deck": FACTORY_LABELS, "count": True}, "invalid type"),
        ("/api/keystream", {"deck": FACTORY_LABELS, "count": -1}, "between"),
        (
            "/api/keystream",
            {"deck": FACTORY_LABELS, "count": MAX_KEYSTREAM_COUNT + 1},
            "between",
        ),
    ],
)
def test_invalid_requests_return_400(client, path, payload, fragment):
    response = client.post(path, json=payload)
    assert response.status_code == 400
    assert fragment in response.get_json()["error"]


def test_non_json_body_is_rejected(client):
    response = client.post("/api/encrypt", data="not json")
    assert response.status_code == 400


@pytest.mark.parametrize("body", ["deck", ["deck"], 5])
def test_non_object_json_body_is_rejected(client, body):
    response = client.post("/api/encrypt", json=body)
    assert response.status_code == 400
    assert "JSON object" in response.get_json()["error"]
