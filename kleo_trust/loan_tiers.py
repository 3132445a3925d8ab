"""
Loan tier module.

Tiers determine the requirements (min stars, min vouchers) for a loan amount:

- Tier 1: 0-50 tokens, min stars: 5, min vouchers: 1
- Tier 2: 50-100 tokens, min stars: 20, min vouchers: 2
- Tier 3: 100-1000 tokens, min stars: 50, min vouchers: 3

Lower tiers are half-open ``[min, max)``; the top tier is closed ``[min, max]``.
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from dataclasses import dataclass
from numbers import Real
from typing import Any, Optional, Sequence, Tuple


@dataclass(frozen=True)
class TierRequirements:
    tier: int
    min_tokens: float
    max_tokens: float
    min_stars: int
    min_vouchers: int


@dataclass(frozen=True)
class EligibilityResult:
    is_valid: bool
    tier: Optional[int]
    requirements: Optional[TierRequirements]
    missing_reputation: int
    missing_vouchers: int


@dataclass(frozen=True)
class TrustStanding:
    is_eligible: bool
    needs_delta: int


DEFAULT_TIERS: Tuple[TierRequirements, ...] = (
    TierRequirements(tier=1, min_tokens=0, max_tokens=50, min_stars=5, min_vouchers=1),
    TierRequirements(tier=2, min_tokens=50, max_tokens=100, min_stars=20, min_vouchers=2),
    TierRequirements(tier=3, min_tokens=100, max_tokens=1000, min_stars=50, min_vouchers=3),
)


def _as_amount(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (Real, Decimal)):
        return None
    try:
        amount = float(value)
    except ValueError:
        return None
    return amount if math.isfinite(amount) else None


def _as_count(value: Any) -> int:
    # Signals that have not loaded yet arrive as None and count as zero,
    # as do negative, fractional and unparsable counts
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, str):
        try:
            value = Decimal(value.strip())
        except InvalidOperation:
            return 0
    if not isinstance(value, (Real, Decimal)):
        return 0
    try:
        count = int(value)
        if count != value:
            return 0
    except (ValueError, ArithmeticError):
        return 0
    return max(count, 0)


class LoanTierTable:
    """
    Ordered, contiguous set of loan tiers with their reputation requirements.
    """

    def __init__(self, tiers: Sequence[TierRequirements] = DEFAULT_TIERS):
        """
        Initialize the tier table.

        Args:
            tiers: Tiers in ascending order. Each tier must start where the
                previous one ends.

        Raises:
            ValueError: If the table is empty, unordered or has gaps.
        """
        ordered = tuple(tiers)
        if not ordered:
            raise ValueError("Tier table cannot be empty")
        for current in ordered:
            if current.min_tokens < 0 or current.max_tokens <= current.min_tokens:
                raise ValueError(f"Tier {current.tier} has an empty token band")
        for previous, current in zip(ordered, ordered[1:]):
            if current.tier <= previous.tier:
                raise ValueError("Tiers must be listed in ascending order")
            if current.min_tokens != previous.max_tokens:
                raise ValueError(
                    f"Tier {current.tier} must start at {previous.max_tokens} tokens"
                )
        self.tiers = ordered
        self._by_tier = {req.tier: req for req in ordered}

    def classify_tier(self, amount: Any) -> Optional[int]:
        """
        Get the loan tier for a token amount.

        Args:
            amount: Loan amount in tokens (human-readable number)

        Returns:
            The tier number, or None when the amount is negative, above the top
            tier's maximum, or not a finite number.
        """
        value = _as_amount(amount)
        if value is None or value < self.tiers[0].min_tokens:
            return None

        for req in self.tiers[:-1]:
            if value < req.max_tokens:
                return req.tier

        top = self.tiers[-1]
        if value <= top.max_tokens:
            return top.tier
        return None

    def requirements_for(self, amount: Any) -> Optional[TierRequirements]:
        tier = self.classify_tier(amount)
        if tier is None:
            return None
        return self._by_tier[tier]

    def evaluate(
        self,
        amount: Any,
        user_reputation_stars: Optional[int],
        current_voucher_count: Optional[int] = 0,
    ) -> EligibilityResult:
        """
        Check whether a user meets the tier requirements for a loan amount.

        Args:
            amount: Loan amount in tokens
            user_reputation_stars: User's available stars (None if not loaded)
            current_voucher_count: Vouchers already received for the loan

        Returns:
            EligibilityResult. An out-of-range amount yields ``tier=None`` with
            both missing counts at zero; callers must check ``tier`` before
            reading the counts as "qualified".
        """
        requirements = self.requirements_for(amount)
        if requirements is None:
            return EligibilityResult(
                is_valid=False,
                tier=None,
                requirements=None,
                missing_reputation=0,
                missing_vouchers=0,
            )

        missing_reputation = max(0, requirements.min_stars - _as_count(user_reputation_stars))
        missing_vouchers = max(0, requirements.min_vouchers - _as_count(current_voucher_count))
        return EligibilityResult(
            is_valid=missing_reputation == 0 and missing_vouchers == 0,
            tier=requirements.tier,
            requirements=requirements,
            missing_reputation=missing_reputation,
            missing_vouchers=missing_vouchers,
        )

    def describe_tier(self, tier: int) -> str:
        req = self._by_tier.get(tier)
        if req is None:
            raise KeyError(f"Unknown loan tier: {tier}")
        return (
            f"Tier {tier}: {req.min_tokens:g}-{req.max_tokens:g} tokens, "
            f"{req.min_stars} stars, {req.min_vouchers} vouchers"
        )

    def all_tiers(self) -> Tuple[TierRequirements, ...]:
        return self.tiers


DEFAULT_TIER_TABLE = LoanTierTable()


def classify_tier(amount: Any) -> Optional[int]:
    return DEFAULT_TIER_TABLE.classify_tier(amount)


def requirements_for(amount: Any) -> Optional[TierRequirements]:
    return DEFAULT_TIER_TABLE.requirements_for(amount)


def evaluate(
    amount: Any,
    user_reputation_stars: Optional[int],
    current_voucher_count: Optional[int] = 0,
) -> EligibilityResult:
    return DEFAULT_TIER_TABLE.evaluate(amount, user_reputation_stars, current_voucher_count)


def describe_tier(tier: int) -> str:
    return DEFAULT_TIER_TABLE.describe_tier(tier)


def all_tiers() -> Tuple[TierRequirements, ...]:
    return DEFAULT_TIER_TABLE.all_tiers()


def trust_standing(trust_score: Optional[int], min_trust_score: Optional[int]) -> TrustStanding:
    """Compare an on-chain trust score with the registry minimum.

    A registry minimum of zero means the minimum has not been configured, so
    nobody is eligible yet.
    """
    score = _as_count(trust_score)
    minimum = _as_count(min_trust_score)
    return TrustStanding(
        is_eligible=minimum > 0 and score >= minimum,
        needs_delta=max(minimum - score, 0),
    )
