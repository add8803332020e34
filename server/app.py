"""Minimal Flask API for encrypting and decrypting with a Solitaire deck."""
from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Flask, jsonify, request

from cards import parse_card, parse_deck_line
from keystream import initialize
from messages import GROUPED, STANDARD, decrypt_message, encrypt_message

MAX_KEYSTREAM_COUNT = 10_000

LOGGER = logging.getLogger("server")

app = Flask(__name__)


def _require_field(payload: Dict[str, Any], field: str, expected: type) -> Any:
    if field not in payload:
        raise ValueError(f"Missing field: {field}")
    value = payload[field]
    # bool is an int subclass; reject it for numeric fields.
    if isinstance(value, bool) or not isinstance(value, expected):
        raise ValueError(f"{field} has invalid type: {type(value).__name__}")
    return value


def _parse_deck(payload: Dict[str, Any]) -> list[int]:
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")
    if "deck" not in payload:
        raise ValueError("Missing field: deck")
    deck = payload["deck"]
    if isinstance(deck, str):
        return parse_deck_line(deck)
    if isinstance(deck, list) and all(isinstance(label, str) for label in deck):
        return [parse_card(label) for label in deck]
    raise ValueError("deck must be a string or a list of card labels")


def _error(exc: ValueError):
    LOGGER.info("Rejected request: %s", exc)
    return jsonify({"error": str(exc)}), 400


@app.post("/api/encrypt")
def encrypt():
    payload = request.get_json(silent=True) or {}
    try:
        tokens = _parse_deck(payload)
        message = _require_field(payload, "message", str)
        fmt = GROUPED if payload.get("group") is True else STANDARD
        ciphertext = encrypt_message(tokens, message, fmt)
    except ValueError as exc:
        return _error(exc)
    return jsonify({"ciphertext": ciphertext})


@app.post("/api/decrypt")
def decrypt():
    payload = request.get_json(silent=True) or {}
    try:
        tokens = _parse_deck(payload)
        ciphertext = _require_field(payload, "ciphertext", str)
        plaintext = decrypt_message(tokens, ciphertext)
    except ValueError as exc:
        return _error(exc)
    return jsonify({"plaintext": plaintext})


@app.post("/api/keystream")
def keystream():
    payload = request.get_json(silent=True) or {}
    try:
        tokens = _parse_deck(payload)
        count = _require_field(payload, "count", int)
        if not 0 <= count <= MAX_KEYSTREAM_COUNT:
            raise ValueError(f"count must be between 0 and {MAX_KEYSTREAM_COUNT}")
        session = initialize(tokens)
    except ValueError as exc:
        return _error(exc)
    return jsonify({"keystream": session.take(count)})


if __name__ == "__main__":  # pragma: no cover - manual execution helper
    app.run(host="0.0.0.0", port=5000, debug=True)
