from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence

from .address_codec import AddressCodec
from .config import TrustCoreSettings
from .loan_tiers import EligibilityResult, evaluate
from .logging_utils import get_logger
from .trust_events import TrustEvent, TrustEventAggregator

logger = get_logger("replay")


def replay_batches(
    batches: Iterable[Sequence[Any]], settings: TrustCoreSettings
) -> TrustEventAggregator:
    """Feed captured batches through a fresh aggregator, oldest batch first."""
    aggregator = TrustEventAggregator(max_events=settings.max_trust_events)
    for index, batch in enumerate(batches, 1):
        aggregator.ingest(batch)
        logger.info("Batch %s: %s event(s), %s retained", index, len(batch), len(aggregator))
    return aggregator


def _event_line(event: TrustEvent, codec: AddressCodec) -> str:
    amount = str(event.amount) if event.amount is not None else "n/a"
    block = str(event.block_number) if event.block_number is not None else "pending"
    return (
        f"{event.kind:<18} {codec.display_address(event.borrower):<16} "
        f"amount={amount:<12} score={event.new_score:<6} block={block}"
    )


def render_feed(
    aggregator: TrustEventAggregator, codec: AddressCodec, wallet_limit: int
) -> str:
    lines: List[str] = []
    lines.append("Trust Event Feed")
    lines.append("================")
    events = aggregator.recent_events()
    if not events:
        lines.append("Waiting for trust events...")
    for event in events:
        lines.append(_event_line(event, codec))

    lines.append("")
    lines.append("Trusted Wallets")
    lines.append("---------------")
    for event in aggregator.distinct_wallets(wallet_limit):
        lines.append(f"{codec.display_address(event.borrower):<16} {event.kind:<18} {event.new_score}")
    return "\n".join(lines)


def render_eligibility(
    amount: float, stars: Optional[int], vouchers: Optional[int]
) -> str:
    result: EligibilityResult = evaluate(amount, stars, vouchers)
    header = f"Eligibility for {amount:g} tokens (stars={stars or 0}, vouchers={vouchers or 0})"
    if result.tier is None:
        return f"{header}: no tier covers this amount"
    if result.is_valid:
        return f"{header}: tier {result.tier}, eligible"
    return (
        f"{header}: tier {result.tier}, missing {result.missing_reputation} stars "
        f"and {result.missing_vouchers} vouchers"
    )
