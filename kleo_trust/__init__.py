"""
Kleo trust core.

Address conversion between H160 and SS58 account forms, the bounded trust
event feed, loan tier eligibility, and the wallet-to-session state bridge.
"""

from .address_codec import (
    AddressCodec,
    AddressDescription,
    addresses_match,
    describe,
    display_address,
    normalize_short_address,
    to_network_address,
    to_short_address,
)
from .config import TrustCoreSettings, load_settings
from .errors import InvalidFormat, TrustCoreError
from .loan_tiers import (
    EligibilityResult,
    LoanTierTable,
    TierRequirements,
    TrustStanding,
    classify_tier,
    evaluate,
    requirements_for,
    trust_standing,
)
from .trust_events import EventKind, TrustEvent, TrustEventAggregator, normalize_event
from .wallet_bridge import (
    ConnectionStatus,
    InMemorySessionStore,
    ObservedAccount,
    SessionState,
    SessionStore,
    WalletObservation,
    WalletStateBridge,
)

__all__ = [
    "AddressCodec",
    "AddressDescription",
    "ConnectionStatus",
    "EligibilityResult",
    "EventKind",
    "InMemorySessionStore",
    "InvalidFormat",
    "LoanTierTable",
    "ObservedAccount",
    "SessionState",
    "SessionStore",
    "TierRequirements",
    "TrustCoreError",
    "TrustCoreSettings",
    "TrustEvent",
    "TrustEventAggregator",
    "TrustStanding",
    "WalletObservation",
    "WalletStateBridge",
    "addresses_match",
    "classify_tier",
    "describe",
    "display_address",
    "evaluate",
    "load_settings",
    "normalize_event",
    "normalize_short_address",
    "requirements_for",
    "to_network_address",
    "to_short_address",
    "trust_standing",
]
