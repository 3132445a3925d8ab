"""
Trust event feed module.

Normalises ``TrustEventRecorded`` batches delivered by the TrustOracle event
subscription and keeps a bounded, newest-first history of them. Recency means
"most recently observed by this client": batches are never reordered by block
number or timestamp.
"""

from __future__ import annotations

import enum
import math
import time
import uuid
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .address_codec import normalize_short_address
from .constants import DEFAULT_MAX_TRUST_EVENTS, DEFAULT_MAX_TRUST_WALLETS, MAX_EVENT_AMOUNT
from .logging_utils import get_logger

logger = get_logger("trust_events")


class EventKind(str, enum.Enum):
    INSTALLMENT_PAID = "InstallmentPaid"
    MISSED_PAYMENT = "MissedPayment"
    GUARANTOR_ADDED = "GuarantorAdded"
    IDENTITY_VERIFIED = "IdentityVerified"


# Declaration order of the contract enum; web3 decodes it as an index
_KIND_BY_INDEX = [kind.value for kind in EventKind]


@dataclass(frozen=True)
class TrustEvent:
    id: str
    borrower: str
    kind: str
    new_score: int
    amount: Optional[int] = None
    timestamp: Optional[float] = None
    block_number: Optional[int] = None


FeedListener = Callable[[Tuple[TrustEvent, ...]], None]


def _optional_int(value: Any, field: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"{field} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        stripped = value.strip().replace(",", "")
        if not stripped:
            return None
        try:
            if stripped[:2].lower() == "0x":
                return int(stripped, 16)
            return int(stripped)
        except ValueError as exc:
            raise ValueError(f"{field} must be an integer, got {value!r}") from exc
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{field} must be an integer, got {value!r}") from exc


def normalize_timestamp(value: Any) -> Optional[float]:
    """Convert an integer or 64-bit-safe numeric string to a number.

    Returns None when the value is missing or does not convert to a finite number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            pass
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def normalize_kind(value: Any) -> str:
    if isinstance(value, EventKind):
        return value.value
    if isinstance(value, Mapping):
        # SCALE-decoded enums arrive as {"type": "InstallmentPaid"}
        value = value.get("type", value.get("tag", ""))
    if isinstance(value, int) and not isinstance(value, bool):
        if 0 <= value < len(_KIND_BY_INDEX):
            return _KIND_BY_INDEX[value]
    return str(value)


def canonical_borrower(address: str) -> str:
    """Lowercase ``0x`` form for H160 borrowers; SS58 strings are kept as given."""
    stripped = str(address).strip()
    return normalize_short_address(stripped) or stripped


def _event_amount(value: Any) -> Optional[int]:
    amount = _optional_int(value, "amount")
    if amount is not None and not 0 <= amount <= MAX_EVENT_AMOUNT:
        raise ValueError(f"amount must fit in a u128, got {value!r}")
    return amount


def synthesize_event_id(block_number: Optional[int]) -> str:
    anchor = block_number if block_number is not None else int(time.time() * 1000)
    return f"{anchor}-{uuid.uuid4().hex}"


def normalize_event(raw: Any) -> TrustEvent:
    """
    Turn one subscription record into a TrustEvent.

    Args:
        raw: Either a TrustEvent (kept, given an id if it has none) or a mapping
            shaped like ``{"blockNumber": ..., "data": {...}}``. Web3 event logs
            that carry ``args`` instead of ``data`` are accepted too.

    Returns:
        The normalised TrustEvent.

    Raises:
        ValueError: If the record has no payload, no borrower, a score that
            is not an integer, or an amount outside the u128 range.
    """
    if isinstance(raw, TrustEvent):
        return replace(
            raw,
            id=raw.id or synthesize_event_id(raw.block_number),
            borrower=canonical_borrower(raw.borrower),
        )

    if not isinstance(raw, Mapping):
        raise ValueError(f"Trust event must be a mapping, got {type(raw).__name__}")

    data = raw.get("data")
    if data is None:
        data = raw.get("args")
    if not isinstance(data, Mapping):
        raise ValueError("Trust event is missing its data payload")

    borrower = data.get("borrower")
    if not borrower or not str(borrower).strip():
        raise ValueError("Trust event is missing the borrower address")

    new_score = _optional_int(data.get("newScore"), "newScore")
    if new_score is None:
        raise ValueError("Trust event is missing newScore")

    block_number = _optional_int(raw.get("blockNumber"), "blockNumber")
    event_id = raw.get("id")
    return TrustEvent(
        id=str(event_id) if event_id else synthesize_event_id(block_number),
        borrower=canonical_borrower(borrower),
        kind=normalize_kind(data.get("kind")),
        new_score=new_score,
        amount=_event_amount(data.get("amount")),
        timestamp=normalize_timestamp(data.get("timestamp")),
        block_number=block_number,
    )


class TrustEventAggregator:
    """
    Bounded newest-first history of trust events plus a per-wallet view.

    ``ingest`` is the only mutator. Readers get tuples, never the live buffer.
    Re-ingesting a batch duplicates its events, so the subscription must deliver
    each batch once.

    Batches are displayed newest batch first, each in its delivered order.
    Eviction follows arrival age: once over ``max_events``, the events that
    arrived earliest are dropped, wherever they sit in the display order.
    """

    def __init__(self, max_events: int = DEFAULT_MAX_TRUST_EVENTS):
        if max_events < 1:
            raise ValueError("max_events must be at least 1")
        self.max_events = max_events
        # (arrival sequence, event) in display order
        self._entries: Tuple[Tuple[int, TrustEvent], ...] = ()
        self._events: Tuple[TrustEvent, ...] = ()
        self._next_sequence = 0
        self._listeners: List[FeedListener] = []

    def __len__(self) -> int:
        return len(self._events)

    def _normalize_batch(self, batch: Iterable[Any]) -> List[TrustEvent]:
        events: List[TrustEvent] = []
        for position, raw in enumerate(batch):
            try:
                events.append(normalize_event(raw))
            except ValueError as exc:
                logger.warning("Skipping trust event %s of batch: %s", position, exc)
        return events

    def ingest(self, batch: Optional[Iterable[Any]]) -> None:
        if not batch:
            return
        incoming = self._normalize_batch(batch)
        if not incoming:
            return

        first = self._next_sequence
        self._next_sequence += len(incoming)
        entries = tuple(enumerate(incoming, first)) + self._entries

        evicted = max(0, len(entries) - self.max_events)
        if evicted:
            oldest_kept = sorted(sequence for sequence, _ in entries)[evicted]
            entries = tuple(entry for entry in entries if entry[0] >= oldest_kept)

        self._entries = entries
        self._events = tuple(event for _, event in entries)
        logger.debug(
            "Ingested %s trust event(s); %s evicted, %s retained",
            len(incoming),
            evicted,
            len(self._events),
        )
        self._notify()

    def recent_events(self) -> Tuple[TrustEvent, ...]:
        return self._events

    def distinct_wallets(self, limit: int = DEFAULT_MAX_TRUST_WALLETS) -> Tuple[TrustEvent, ...]:
        """Latest surviving event per wallet, newest first, at most ``limit`` wallets."""
        if limit <= 0:
            return ()
        unique: Dict[str, TrustEvent] = {}
        for event in self._events:
            if event.borrower not in unique:
                unique[event.borrower] = event
            if len(unique) >= limit:
                break
        return tuple(unique.values())

    def wallet_view(self, address: str) -> Optional[TrustEvent]:
        borrower = canonical_borrower(address)
        for event in self._events:
            if event.borrower == borrower:
                return event
        return None

    def subscribe(self, listener: FeedListener) -> Callable[[], None]:
        """Call ``listener`` with the new snapshot after every non-empty ingest.

        Returns a callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self._events
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:  # pylint: disable=broad-except
                logger.exception("Trust feed listener raised an error.")
