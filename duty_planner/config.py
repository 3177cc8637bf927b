from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


@dataclass(frozen=True)
class OrderProviderConfig:
    base_url: str
    api_key: str
    timeout_s: float
    retries: int


@dataclass(frozen=True)
class RuntimeConfig:
    artifact_root: Path
    preference_bonus: float
    order_provider: OrderProviderConfig | None


def load_env(dotenv_path: str | Path | None = None) -> None:
    path = Path(dotenv_path) if dotenv_path else None
    if path and path.exists():
        load_dotenv(path)
        return
    load_dotenv()


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def order_provider_config() -> OrderProviderConfig | None:
    """Remote turn-order service settings, or None when no URL is configured."""
    base_url = os.getenv("DUTY_PLANNER_ORDER_URL", "").strip().rstrip("/")
    if not base_url:
        return None
    return OrderProviderConfig(
        base_url=base_url,
        api_key=os.getenv("DUTY_PLANNER_ORDER_API_KEY", "").strip(),
        timeout_s=_float_env("DUTY_PLANNER_ORDER_TIMEOUT", 30.0),
        retries=max(1, int(_float_env("DUTY_PLANNER_ORDER_RETRIES", 3))),
    )


def runtime_config() -> RuntimeConfig:
    artifact_root = Path(os.getenv("DUTY_PLANNER_ARTIFACT_DIR", "./artifacts")).expanduser().resolve()
    artifact_root.mkdir(parents=True, exist_ok=True)
    return RuntimeConfig(
        artifact_root=artifact_root,
        preference_bonus=_float_env("DUTY_PLANNER_PREFERENCE_BONUS", -2.0),
        order_provider=order_provider_config(),
    )
