from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

_TRUTHY = {"1", "true", "yes"}


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    hmac_secret: str = ""
    redis_url: Optional[str] = None
    allow_internal_debug: bool = False
    idempotency_ttl_seconds: int = 86400
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        settings = cls(
            hmac_secret=env.get("HMAC_SECRET", ""),
            redis_url=env.get("REDIS_URL") or None,
            allow_internal_debug=_as_bool(env.get("ALLOW_INTERNAL_DEBUG", "false")),
            idempotency_ttl_seconds=int(env.get("IDEMPOTENCY_TTL_SECONDS", "86400")),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )
        config_path = env.get("ESTIMATOR_CONFIG")
        if config_path:
            settings = settings.with_file(Path(config_path))
        return settings

    def with_file(self, path: Path) -> "Settings":
        """Overlay values from a TOML file; a top-level ``[estimator]`` table is optional."""

        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with path.open("rb") as fh:
            payload = tomllib.load(fh)
        section = payload.get("estimator", payload)
        overrides: dict[str, Any] = {}
        if "HMAC_SECRET" in section:
            overrides["hmac_secret"] = str(section["HMAC_SECRET"])
        if "REDIS_URL" in section:
            overrides["redis_url"] = str(section["REDIS_URL"]) or None
        if "ALLOW_INTERNAL_DEBUG" in section:
            overrides["allow_internal_debug"] = _as_bool(section["ALLOW_INTERNAL_DEBUG"])
        if "IDEMPOTENCY_TTL_SECONDS" in section:
            overrides["idempotency_ttl_seconds"] = int(section["IDEMPOTENCY_TTL_SECONDS"])
        if "LOG_LEVEL" in section:
            overrides["log_level"] = str(section["LOG_LEVEL"]).upper()
        return replace(self, **overrides)
