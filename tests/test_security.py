from __future__ import annotations

from security import RANDOM_ALPHABET, create_random_string, hash_password, verify_password


def test_hash_password_round_trips_through_verify() -> None:
    hashed = hash_password("secret")

    assert hashed != "secret"
    assert hashed.startswith("pbkdf2:sha256")
    assert verify_password(hashed, "secret") is True
    assert verify_password(hashed, "Secret") is False


def test_hash_password_is_salted() -> None:
    assert hash_password("secret") != hash_password("secret")


def test_hash_password_rejects_empty_input() -> None:
    assert hash_password("") is None
    assert hash_password(None) is None  # type: ignore[arg-type]


def test_verify_password_rejects_missing_hash() -> None:
    assert verify_password("", "secret") is False
    assert verify_password(None, "secret") is False


def test_random_string_length_and_alphabet() -> None:
    value = create_random_string(20)
    assert len(value) == 20
    assert set(value) <= set(RANDOM_ALPHABET)
    assert create_random_string(20) != value


def test_random_string_rejects_invalid_length() -> None:
    assert create_random_string(0) is None
    assert create_random_string(-3) is None
    assert create_random_string(True) is None  # type: ignore[arg-type]
