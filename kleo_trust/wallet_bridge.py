"""
Wallet state bridge module.

Keeps the session store in step with what the wallet extension reports. The
extension is polled or notified many times per second, so every tick compares
against private memos and only writes to the store when something changed.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple

from .constants import UNKNOWN_WALLET_SOURCE
from .logging_utils import get_logger

logger = get_logger("wallet_bridge")

_UNSET: Any = object()


class ConnectionStatus(str, enum.Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


@dataclass(frozen=True)
class ObservedAccount:
    address: str
    name: Optional[str] = None
    source: Optional[str] = None


@dataclass(frozen=True)
class WalletObservation:
    accounts: Tuple[ObservedAccount, ...] = ()
    connected_account: Optional[str] = None
    connected_wallets: Tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "WalletObservation":
        """Build an observation from the wallet adapter's ``{accounts, connectedAccount, connectedWallets}``."""
        if not isinstance(payload, Mapping):
            return cls()

        accounts: List[ObservedAccount] = []
        for entry in payload.get("accounts") or ():
            if isinstance(entry, str):
                address, name, source = entry, None, None
            elif isinstance(entry, Mapping):
                address = entry.get("address")
                name = entry.get("name")
                source = entry.get("source")
            else:
                continue
            if address:
                accounts.append(ObservedAccount(address=str(address), name=name, source=source))

        connected = payload.get("connectedAccount")
        if isinstance(connected, Mapping):
            connected = connected.get("address")

        wallets: List[str] = []
        for wallet in payload.get("connectedWallets") or ():
            wallet_id = wallet.get("id") if isinstance(wallet, Mapping) else wallet
            if wallet_id:
                wallets.append(str(wallet_id))

        return cls(
            accounts=tuple(accounts),
            connected_account=str(connected) if connected else None,
            connected_wallets=tuple(wallets),
        )


@dataclass(frozen=True)
class SessionState:
    accounts: Tuple[Dict[str, Any], ...] = ()
    selected_address: Optional[str] = None
    status: ConnectionStatus = ConnectionStatus.IDLE
    error: Optional[str] = None


class SessionStore(Protocol):
    def snapshot(self) -> SessionState: ...

    def update(self, **changes: Any) -> None: ...


@dataclass
class InMemorySessionStore:
    state: SessionState = field(default_factory=SessionState)
    writes: List[Dict[str, Any]] = field(default_factory=list)

    def snapshot(self) -> SessionState:
        return self.state

    def update(self, **changes: Any) -> None:
        if "accounts" in changes:
            changes["accounts"] = tuple(changes["accounts"])
        self.writes.append(dict(changes))
        self.state = replace(self.state, **changes)

    def set_error(self, message: Optional[str] = None) -> None:
        status = ConnectionStatus.ERROR if message else self.state.status
        self.update(error=message, status=status)


def to_injected_accounts(observation: WalletObservation) -> List[Dict[str, Any]]:
    """Convert observed accounts to the ``{address, meta}`` shape the session store keeps."""
    fallback_source = (
        observation.connected_wallets[0] if observation.connected_wallets else UNKNOWN_WALLET_SOURCE
    )
    return [
        {
            "address": account.address,
            "meta": {
                "name": account.name or account.address,
                "source": account.source or fallback_source,
                "genesisHash": None,
            },
        }
        for account in observation.accounts
    ]


class WalletStateBridge:
    """
    Change-detecting sync from wallet observations into a SessionStore.

    The account list and the connected account are memoised separately
    because the extension can change one without the other. All changes from
    one tick reach the store in a single ``update`` call.
    """

    def __init__(self, store: SessionStore):
        self.store = store
        self._last_accounts_key: Any = _UNSET
        self._last_connected: Any = _UNSET

    def reset(self) -> None:
        self._last_accounts_key = _UNSET
        self._last_connected = _UNSET

    def tick(self, observation: WalletObservation) -> Dict[str, Any]:
        """
        Reconcile one observation with the store.

        Args:
            observation: Current snapshot from the wallet extension

        Returns:
            The changes written to the store (empty when nothing changed).
        """
        changes: Dict[str, Any] = {}

        accounts_key = ",".join(account.address for account in observation.accounts)
        if accounts_key != self._last_accounts_key:
            self._last_accounts_key = accounts_key
            changes["accounts"] = to_injected_accounts(observation)
            if not observation.accounts and not observation.connected_account:
                changes["status"] = ConnectionStatus.IDLE

        connected = observation.connected_account
        if connected != self._last_connected:
            self._last_connected = connected
            if connected:
                changes["selected_address"] = connected
                changes["status"] = ConnectionStatus.CONNECTED
            elif not observation.accounts:
                changes["selected_address"] = None
                changes["status"] = ConnectionStatus.IDLE
            # Accounts but no selection yet: leave the status alone

        if observation.accounts and connected:
            current = self.store.snapshot()
            if current.error is not None:
                # Only the message is cleared; status transitions stay with the store
                changes["error"] = None

        if changes:
            logger.debug("Syncing wallet state: %s", sorted(changes))
            self.store.update(**changes)
        return changes
