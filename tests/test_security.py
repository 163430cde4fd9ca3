import pytest
from fastapi import HTTPException

from box_estimator.security import IdempotencyStore, SignatureVerifier


def test_verifier_disabled_without_secret():
    SignatureVerifier("").verify(None, b"{}")


def test_verifier_accepts_matching_signature():
    verifier = SignatureVerifier("secret")
    verifier.verify(verifier.sign(b"payload"), b"payload")
    with pytest.raises(HTTPException) as excinfo:
        verifier.verify(verifier.sign(b"payload"), b"tampered")
    assert excinfo.value.status_code == 401


def test_idempotency_without_key_always_computes():
    store = IdempotencyStore()
    calls = []
    store.get_or_set(None, b"{}", lambda: calls.append(1) or {"n": len(calls)})
    store.get_or_set(None, b"{}", lambda: calls.append(1) or {"n": len(calls)})
    assert len(calls) == 2


def test_idempotency_expires_after_ttl(monkeypatch):
    store = IdempotencyStore(ttl_seconds=10)
    now = [1000.0]
    monkeypatch.setattr(store, "_now", lambda: now[0])
    assert store.get_or_set("k", b"a", lambda: {"v": 1}) == {"v": 1}
    assert store.get_or_set("k", b"a", lambda: {"v": 2}) == {"v": 1}
    now[0] += 11
    assert store.get_or_set("k", b"b", lambda: {"v": 3}) == {"v": 3}


def test_expired_local_entries_are_evicted(monkeypatch):
    store = IdempotencyStore(ttl_seconds=10)
    now = [1000.0]
    monkeypatch.setattr(store, "_now", lambda: now[0])
    store.get_or_set("old", b"a", lambda: {"v": 1})
    now[0] += 11
    store.get_or_set("new", b"b", lambda: {"v": 2})
    assert set(store._local) == {"new"}
