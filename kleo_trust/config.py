# Trust-core configuration for the Kleo lending dapp.
# Env key names stay short and match the ones used by the contract deployment scripts.

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

from .constants import (
    ASSET_HUB_SS58_PREFIX,
    DEFAULT_ENV_FILE,
    DEFAULT_MAX_TRUST_EVENTS,
    DEFAULT_MAX_TRUST_WALLETS,
)
from .logging_utils import LOG_LEVEL_ENV, get_logger

# SS58 network prefix used when rendering contract-space addresses
SS58_PREFIX_ENV = "KLEO_SS58_PREFIX"

# Bounds for the live trust feed
MAX_TRUST_EVENTS_ENV = "KLEO_MAX_TRUST_EVENTS"
MAX_TRUST_WALLETS_ENV = "KLEO_MAX_TRUST_WALLETS"

# Watched TrustOracle contract (H160 or SS58)
TRUST_ORACLE_ADDRESS_ENV = "TRUST_ORACLE_ADDRESS"

logger = get_logger("config")


@dataclass(frozen=True)
class TrustCoreSettings:
    ss58_prefix: int = ASSET_HUB_SS58_PREFIX
    max_trust_events: int = DEFAULT_MAX_TRUST_EVENTS
    max_trust_wallets: int = DEFAULT_MAX_TRUST_WALLETS
    log_level: str = "INFO"
    trust_oracle_address: Optional[str] = None


def load_env_file(path: Optional[Path] = None) -> bool:
    """Load KEY=VALUE pairs from ``path`` (repo-root ``.env`` by default).

    Values already present in the process environment win.
    """
    env_path = path or DEFAULT_ENV_FILE
    if not env_path.exists():
        return False
    return load_dotenv(env_path, override=False)


def _int_from_env(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip(), 0)
    except ValueError:
        logger.warning("%s=%r is not an integer; using %s", name, raw, default)
        return default
    if value < minimum:
        logger.warning("%s=%s is below %s; using %s", name, value, minimum, default)
        return default
    return value


def get_trust_oracle_address() -> Tuple[Optional[str], str]:
    addr = os.getenv(TRUST_ORACLE_ADDRESS_ENV)
    return (addr.strip(), TRUST_ORACLE_ADDRESS_ENV) if addr and addr.strip() else (None, "")


def load_settings(env_file: Optional[Path] = None) -> TrustCoreSettings:
    """Build settings from the environment, reading ``env_file`` first when given."""
    if env_file is not None:
        load_env_file(env_file)

    oracle_address, _ = get_trust_oracle_address()
    return TrustCoreSettings(
        ss58_prefix=_int_from_env(SS58_PREFIX_ENV, ASSET_HUB_SS58_PREFIX),
        max_trust_events=_int_from_env(
            MAX_TRUST_EVENTS_ENV, DEFAULT_MAX_TRUST_EVENTS, minimum=1
        ),
        max_trust_wallets=_int_from_env(
            MAX_TRUST_WALLETS_ENV, DEFAULT_MAX_TRUST_WALLETS, minimum=1
        ),
        log_level=os.getenv(LOG_LEVEL_ENV, "INFO").upper(),
        trust_oracle_address=oracle_address,
    )
