from __future__ import annotations

from types import SimpleNamespace

import pytest

from kleo_trust import streamlit_session
from kleo_trust.streamlit_session import StreamlitSessionStore, observation_from_component
from kleo_trust.wallet_bridge import ConnectionStatus, WalletObservation, WalletStateBridge

X = "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"


@pytest.fixture
def session_state(monkeypatch: pytest.MonkeyPatch) -> dict:
    state: dict = {}
    monkeypatch.setattr(streamlit_session, "st", SimpleNamespace(session_state=state))
    return state


def test_store_initialises_bucket(session_state: dict) -> None:
    store = StreamlitSessionStore()
    snapshot = store.snapshot()
    assert snapshot.accounts == ()
    assert snapshot.status == ConnectionStatus.IDLE
    assert session_state["kleo_wallet_session"]["status"] == "idle"


def test_bridge_writes_into_session_state(session_state: dict) -> None:
    store = StreamlitSessionStore(key="wallet")
    bridge = WalletStateBridge(store)
    bridge.tick(observation_from_component({"address": X, "walletId": "subwallet-js"}))

    bucket = session_state["wallet"]
    assert bucket["status"] == "connected"
    assert bucket["selected_address"] == X
    assert bucket["accounts"][0]["meta"]["source"] == "subwallet-js"


def test_set_error_and_clear(session_state: dict) -> None:
    store = StreamlitSessionStore()
    store.set_error("Wallet locked")
    assert store.snapshot().status == ConnectionStatus.ERROR
    assert store.snapshot().error == "Wallet locked"
    store.clear()
    assert "kleo_wallet_session" not in session_state


def test_unknown_status_reads_as_idle(session_state: dict) -> None:
    session_state["kleo_wallet_session"] = {"status": "bogus"}
    assert StreamlitSessionStore().snapshot().status == ConnectionStatus.IDLE


def test_observation_from_component_shapes() -> None:
    assert observation_from_component(None) == WalletObservation()
    assert observation_from_component({"chainId": 1}) == WalletObservation()

    full = observation_from_component(
        {"accounts": [{"address": X}], "connectedAccount": None, "connectedWallets": []}
    )
    assert full.connected_account is None
    assert [account.address for account in full.accounts] == [X]

    single = observation_from_component({"address": X})
    assert single.connected_account == X
    assert single.connected_wallets == ()
