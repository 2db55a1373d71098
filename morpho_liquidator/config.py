"""Configuration loader: reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://blue-api.morpho.org/graphql"

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChainConfig:
    chain_id: int = 1
    rpc_url: str = ""
    rpc_timeout: int = 30


@dataclass(frozen=True)
class IndexerConfig:
    api_url: str = DEFAULT_API_URL
    page_size: int = 100
    timeout: int = 30
    max_retries: int = 5
    retry_backoff: float = 1.0


@dataclass(frozen=True)
class ContractsConfig:
    morpho: str = ""
    liquidator: str = ""
    liquidator_abi_path: str = ""


@dataclass(frozen=True)
class WalletConfig:
    private_key: str = field(default="", repr=False)


@dataclass(frozen=True)
class ScanConfig:
    concurrency: int = 3
    gas_limit: int = 1_500_000
    wait_for_receipt: bool = True
    receipt_timeout: int = 120
    output_path: str = "verified_liquidations_chain.json"
    interval_seconds: int = 60


@dataclass(frozen=True)
class TelegramConfig:
    enabled: bool = False
    alert_bot_token: str = ""
    log_bot_token: str = ""
    chat_id: str = ""


@dataclass(frozen=True)
class NotificationsConfig:
    telegram: TelegramConfig = field(default_factory=TelegramConfig)


@dataclass(frozen=True)
class AppConfig:
    chain: ChainConfig = field(default_factory=ChainConfig)
    indexer: IndexerConfig = field(default_factory=IndexerConfig)
    contracts: ContractsConfig = field(default_factory=ContractsConfig)
    wallet: WalletConfig = field(default_factory=WalletConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_chain(raw: dict[str, Any]) -> ChainConfig:
    return ChainConfig(
        chain_id=int(raw.get("chain_id") or 0),
        rpc_url=raw.get("rpc_url", ""),
        rpc_timeout=int(raw.get("rpc_timeout", 30)),
    )


def _build_indexer(raw: dict[str, Any]) -> IndexerConfig:
    return IndexerConfig(
        api_url=raw.get("api_url", DEFAULT_API_URL),
        page_size=int(raw.get("page_size", 100)),
        timeout=int(raw.get("timeout", 30)),
        max_retries=int(raw.get("max_retries", 5)),
        retry_backoff=float(raw.get("retry_backoff", 1.0)),
    )


def _build_contracts(raw: dict[str, Any]) -> ContractsConfig:
    return ContractsConfig(
        morpho=raw.get("morpho", ""),
        liquidator=raw.get("liquidator", ""),
        liquidator_abi_path=raw.get("liquidator_abi_path", "") or "",
    )


def _build_scan(raw: dict[str, Any]) -> ScanConfig:
    return ScanConfig(
        concurrency=int(raw.get("concurrency", 3)),
        gas_limit=int(raw.get("gas_limit", 1_500_000)),
        wait_for_receipt=bool(raw.get("wait_for_receipt", True)),
        receipt_timeout=int(raw.get("receipt_timeout", 120)),
        output_path=raw.get("output_path", ScanConfig.output_path),
        interval_seconds=int(raw.get("interval_seconds", 60)),
    )


def _build_notifications(raw: dict[str, Any]) -> NotificationsConfig:
    tg = raw.get("telegram") or {}
    return NotificationsConfig(
        telegram=TelegramConfig(
            enabled=bool(tg.get("enabled", False)),
            alert_bot_token=tg.get("alert_bot_token", ""),
            log_bot_token=tg.get("log_bot_token", ""),
            chat_id=str(tg.get("chat_id", "")),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file).

    Raises:
        FileNotFoundError: The config file does not exist.
        ValueError: A required setting is missing or out of range.
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        chain=_build_chain(raw.get("chain") or {}),
        indexer=_build_indexer(raw.get("indexer") or {}),
        contracts=_build_contracts(raw.get("contracts") or {}),
        wallet=WalletConfig(private_key=(raw.get("wallet") or {}).get("private_key", "")),
        scan=_build_scan(raw.get("scan") or {}),
        notifications=_build_notifications(raw.get("notifications") or {}),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if cfg.chain.chain_id <= 0:
        raise ValueError("chain.chain_id must be a positive integer")
    if not cfg.chain.rpc_url:
        raise ValueError("chain.rpc_url is not set")
    if not cfg.indexer.api_url:
        raise ValueError("indexer.api_url is not set")
    if cfg.indexer.page_size < 1:
        raise ValueError("indexer.page_size must be at least 1")
    if cfg.indexer.max_retries < 1:
        raise ValueError("indexer.max_retries must be at least 1")
    if not cfg.contracts.morpho:
        raise ValueError("contracts.morpho address is not set")
    if not cfg.contracts.liquidator:
        raise ValueError("contracts.liquidator address is not set")
    if not cfg.wallet.private_key:
        raise ValueError("wallet.private_key is not set")
    if cfg.scan.concurrency < 1:
        raise ValueError("scan.concurrency must be at least 1")
    if cfg.scan.gas_limit <= 0:
        raise ValueError("scan.gas_limit must be positive")

    tg = cfg.notifications.telegram
    if tg.enabled and not tg.chat_id:
        raise ValueError("notifications.telegram is enabled but chat_id is empty")
