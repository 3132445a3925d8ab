"""Streamlit session-state adapters for the wallet bridge."""
from __future__ import annotations

from typing import Any, Dict, MutableMapping, Optional

import streamlit as st

from .constants import WALLET_SESSION_KEY
from .wallet_bridge import ConnectionStatus, SessionState, WalletObservation

# Usage in pages:
#   store = StreamlitSessionStore()
#   bridge = st.session_state.setdefault("kleo_wallet_bridge", WalletStateBridge(store))
#   bridge.tick(observation_from_component(connect_wallet(key="wallet_connect")))


class StreamlitSessionStore:
    """SessionStore kept under one key of ``st.session_state``."""

    def __init__(self, key: str = WALLET_SESSION_KEY) -> None:
        self.key = key

    def _bucket(self) -> MutableMapping[str, Any]:
        bucket = st.session_state.get(self.key)
        if not isinstance(bucket, dict):
            bucket = {
                "accounts": [],
                "selected_address": None,
                "status": ConnectionStatus.IDLE.value,
                "error": None,
            }
            st.session_state[self.key] = bucket
        return bucket

    def snapshot(self) -> SessionState:
        bucket = self._bucket()
        try:
            status = ConnectionStatus(bucket.get("status") or ConnectionStatus.IDLE.value)
        except ValueError:
            status = ConnectionStatus.IDLE
        return SessionState(
            accounts=tuple(bucket.get("accounts") or ()),
            selected_address=bucket.get("selected_address"),
            status=status,
            error=bucket.get("error"),
        )

    def update(self, **changes: Any) -> None:
        bucket = dict(self._bucket())
        for name, value in changes.items():
            if name == "status":
                value = ConnectionStatus(value).value
            elif name == "accounts":
                value = list(value)
            bucket[name] = value
        st.session_state[self.key] = bucket

    def set_error(self, message: Optional[str] = None) -> None:
        status = ConnectionStatus.ERROR if message else self.snapshot().status
        self.update(error=message, status=status)

    def clear(self) -> None:
        st.session_state.pop(self.key, None)


def observation_from_component(value: Any) -> WalletObservation:
    """Map a wallet-connect component payload to a WalletObservation.

    The component either reports the full ``{accounts, connectedAccount,
    connectedWallets}`` shape or a single ``{address, walletId?}`` selection.
    """
    if not isinstance(value, dict):
        return WalletObservation()
    if "accounts" in value or "connectedAccount" in value:
        return WalletObservation.from_payload(value)

    address = value.get("address")
    if not address:
        return WalletObservation()
    wallet_id = value.get("walletId") or value.get("source")
    payload: Dict[str, Any] = {
        "accounts": [{"address": address, "name": value.get("name"), "source": wallet_id}],
        "connectedAccount": {"address": address},
        "connectedWallets": [{"id": wallet_id}] if wallet_id else [],
    }
    return WalletObservation.from_payload(payload)
