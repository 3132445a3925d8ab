from __future__ import annotations

import re
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_ENV_FILE = BASE_DIR / ".env"

# Asset Hub accounts are rendered with the generic substrate prefix.
ASSET_HUB_SS58_PREFIX = 0
SS58_CHECKSUM_PREFIX = b"SS58PRE"
H160_BYTES = 20
ACCOUNT_ID_BYTES = 32

HEX_ADDRESS_PATTERN = re.compile(r"^(0x)?[0-9a-fA-F]{40}$")

DEFAULT_MAX_TRUST_EVENTS = 24
DEFAULT_MAX_TRUST_WALLETS = 8

# TrustEventRecorded.amount is a u128
MAX_EVENT_AMOUNT = 2**128 - 1

WALLET_SESSION_KEY = "kleo_wallet_session"
UNKNOWN_WALLET_SOURCE = "unknown"


__all__ = [
    "BASE_DIR",
    "DEFAULT_ENV_FILE",
    "ASSET_HUB_SS58_PREFIX",
    "SS58_CHECKSUM_PREFIX",
    "H160_BYTES",
    "ACCOUNT_ID_BYTES",
    "HEX_ADDRESS_PATTERN",
    "DEFAULT_MAX_TRUST_EVENTS",
    "DEFAULT_MAX_TRUST_WALLETS",
    "MAX_EVENT_AMOUNT",
    "WALLET_SESSION_KEY",
    "UNKNOWN_WALLET_SOURCE",
]
