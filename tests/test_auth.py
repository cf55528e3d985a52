import pytest

from core.exceptions import AuthenticationError
from inventory.auth.gate import AdminGate, authenticate_user


def test_admin_gate_default_password():
    gate = AdminGate()
    assert gate.is_logged_in is False
    gate.login("123456")
    assert gate.is_logged_in is True
    gate.logout()
    assert gate.is_logged_in is False


def test_admin_gate_wrong_password():
    gate = AdminGate("secret")
    with pytest.raises(AuthenticationError):
        gate.login("123456")
    with pytest.raises(AuthenticationError):
        gate.login("")
    assert gate.is_logged_in is False


def test_change_password_requires_login():
    gate = AdminGate("secret")
    with pytest.raises(AuthenticationError):
        gate.change_password("newpass")


def test_change_password():
    gate = AdminGate("secret")
    gate.login("secret")
    with pytest.raises(ValueError):
        gate.change_password("abc")
    gate.change_password("abcd")
    gate.logout()

    with pytest.raises(AuthenticationError):
        gate.login("secret")
    gate.login("abcd")


def test_authenticate_user(seeded_store):
    assert authenticate_user(seeded_store, "U001", "alicepass") is True
    assert authenticate_user(seeded_store, "U001", "wrong") is False
    assert authenticate_user(seeded_store, "U003", "123456") is True
    assert authenticate_user(seeded_store, "NOPE", "123") is False
    assert authenticate_user(seeded_store, "U001", "") is False
