from __future__ import annotations

import hashlib
import hmac
import json
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import redis
from fastapi import HTTPException

SIGNATURE_PREFIX = "sha256="


class SignatureVerifier:
    """Checks ``X-Signature: sha256=<hex>`` against the raw request body.

    Verification is skipped entirely when no secret is configured.
    """

    def __init__(self, secret: str):
        self._secret = secret.encode("utf-8")

    @property
    def enabled(self) -> bool:
        return bool(self._secret)

    def sign(self, payload: bytes) -> str:
        return SIGNATURE_PREFIX + hmac.new(self._secret, payload, hashlib.sha256).hexdigest()

    def verify(self, header: Optional[str], payload: bytes) -> None:
        if not self.enabled:
            return
        if not header or not header.startswith(SIGNATURE_PREFIX):
            raise HTTPException(status_code=401, detail="Missing or invalid signature header")
        if not hmac.compare_digest(header, self.sign(payload)):
            raise HTTPException(status_code=401, detail="Signature mismatch")


@dataclass
class _CachedEstimate:
    body_hash: str
    response_json: str
    created_at: float


class IdempotencyStore:
    """Replays the first response for a repeated ``Idempotency-Key``.

    A repeated key with a different body is a conflict (409).
    """

    namespace = "estimate:idemp:"

    def __init__(self, redis_url: Optional[str] = None, ttl_seconds: int = 86400):
        self._ttl = ttl_seconds
        self._redis = redis.Redis.from_url(redis_url) if redis_url else None
        self._local: Dict[str, _CachedEstimate] = {}
        self._lock = threading.Lock()

    def _now(self) -> float:
        return time.time()

    def _evict_expired(self, now: float) -> None:
        stale = [key for key, cached in self._local.items() if now - cached.created_at >= self._ttl]
        for key in stale:
            del self._local[key]

    @staticmethod
    def _check(stored_hash: str, body_hash: str) -> None:
        if stored_hash != body_hash:
            raise HTTPException(status_code=409, detail="Idempotency conflict")

    def get_or_set(self, key: Optional[str], body: bytes, compute: Callable[[], Any]) -> Any:
        if not key:
            return compute()
        body_hash = hashlib.sha256(body).hexdigest()
        if self._redis is not None:
            return self._get_or_set_redis(self.namespace + key, body_hash, compute)
        with self._lock:
            now = self._now()
            self._evict_expired(now)
            cached = self._local.get(key)
            if cached:
                self._check(cached.body_hash, body_hash)
                return json.loads(cached.response_json)
            response = compute()
            self._local[key] = _CachedEstimate(body_hash, json.dumps(response), now)
            return response

    def _get_or_set_redis(self, redis_key: str, body_hash: str, compute: Callable[[], Any]) -> Any:
        existing = self._redis.get(redis_key)
        if existing:
            record = json.loads(existing)
            self._check(record["body_hash"], body_hash)
            return json.loads(record["response_json"])
        response = compute()
        payload = json.dumps({"body_hash": body_hash, "response_json": json.dumps(response)})
        self._redis.setex(redis_key, self._ttl, payload)
        return response
