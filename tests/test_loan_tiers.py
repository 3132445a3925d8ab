from __future__ import annotations

from decimal import Decimal

import pytest

from kleo_trust.loan_tiers import (
    DEFAULT_TIERS,
    LoanTierTable,
    TierRequirements,
    all_tiers,
    classify_tier,
    describe_tier,
    evaluate,
    requirements_for,
    trust_standing,
)


@pytest.mark.parametrize(
    ("amount", "tier"),
    [
        (0, 1),
        (49.99, 1),
        (50, 2),
        (99.5, 2),
        (100, 3),
        (1000, 3),
        (1000.0001, None),
        (-1, None),
        (Decimal("75"), 2),
    ],
)
def test_classify_tier_boundaries(amount: object, tier: object) -> None:
    assert classify_tier(amount) == tier


@pytest.mark.parametrize("amount", [float("nan"), float("inf"), "50", None, True])
def test_classify_tier_returns_none_for_garbage(amount: object) -> None:
    assert classify_tier(amount) is None


def test_requirements_for_looks_up_tier() -> None:
    req = requirements_for(75)
    assert req is not None
    assert (req.tier, req.min_stars, req.min_vouchers) == (2, 20, 2)
    assert requirements_for(5000) is None


def test_evaluate_reports_missing_requirements() -> None:
    result = evaluate(30, user_reputation_stars=2, current_voucher_count=0)
    assert result.is_valid is False
    assert result.tier == 1
    assert result.missing_reputation == 3
    assert result.missing_vouchers == 1
    assert result.requirements == DEFAULT_TIERS[0]


def test_evaluate_passes_when_requirements_met() -> None:
    result = evaluate(150, user_reputation_stars=60, current_voucher_count=3)
    assert result.is_valid is True
    assert result.tier == 3
    assert result.missing_reputation == 0
    assert result.missing_vouchers == 0


def test_evaluate_voucher_count_defaults_to_zero() -> None:
    result = evaluate(10, user_reputation_stars=5)
    assert result.missing_vouchers == 1
    assert not result.is_valid


def test_evaluate_out_of_range_has_no_tier_and_zero_missing() -> None:
    result = evaluate(5000, user_reputation_stars=0, current_voucher_count=0)
    assert result.is_valid is False
    assert result.tier is None
    assert result.requirements is None
    assert result.missing_reputation == 0
    assert result.missing_vouchers == 0


def test_evaluate_treats_unloaded_signals_as_zero() -> None:
    result = evaluate(60, user_reputation_stars=None, current_voucher_count=None)
    assert result.missing_reputation == 20
    assert result.missing_vouchers == 2


@pytest.mark.parametrize(
    "stars",
    [4.9, "many", "", float("nan"), float("inf"), -10, True, Decimal("7.5"), object()],
)
def test_evaluate_counts_unusable_stars_as_zero(stars: object) -> None:
    result = evaluate(60, stars, 2)  # type: ignore[arg-type]
    assert result.tier == 2
    assert result.missing_reputation == 20
    assert result.missing_vouchers == 0


def test_evaluate_accepts_integral_counts_in_other_forms() -> None:
    result = evaluate(60, " 20 ", 2.0)  # type: ignore[arg-type]
    assert result.is_valid
    assert evaluate(60, Decimal("20"), Decimal("1")).missing_vouchers == 1


def test_describe_and_list_tiers() -> None:
    assert describe_tier(1) == "Tier 1: 0-50 tokens, 5 stars, 1 vouchers"
    assert [req.tier for req in all_tiers()] == [1, 2, 3]
    with pytest.raises(KeyError):
        describe_tier(4)


def test_custom_tier_table() -> None:
    table = LoanTierTable(
        [
            TierRequirements(tier=1, min_tokens=0, max_tokens=10, min_stars=1, min_vouchers=0),
            TierRequirements(tier=2, min_tokens=10, max_tokens=20, min_stars=2, min_vouchers=1),
        ]
    )
    assert table.classify_tier(10) == 2
    assert table.classify_tier(20) == 2
    assert table.classify_tier(20.5) is None
    assert table.evaluate(5, 1, 0).is_valid


@pytest.mark.parametrize(
    "tiers",
    [
        [],
        [
            TierRequirements(tier=1, min_tokens=0, max_tokens=10, min_stars=1, min_vouchers=0),
            TierRequirements(tier=2, min_tokens=15, max_tokens=20, min_stars=2, min_vouchers=1),
        ],
        [
            TierRequirements(tier=2, min_tokens=0, max_tokens=10, min_stars=1, min_vouchers=0),
            TierRequirements(tier=1, min_tokens=10, max_tokens=20, min_stars=2, min_vouchers=1),
        ],
        [TierRequirements(tier=1, min_tokens=5, max_tokens=5, min_stars=1, min_vouchers=0)],
    ],
)
def test_tier_table_rejects_inconsistent_bands(tiers: list) -> None:
    with pytest.raises(ValueError):
        LoanTierTable(tiers)


def test_trust_standing() -> None:
    assert trust_standing(80, 50).is_eligible
    assert trust_standing(80, 50).needs_delta == 0
    standing = trust_standing(30, 50)
    assert not standing.is_eligible
    assert standing.needs_delta == 20
    # An unset registry minimum never qualifies anyone
    assert not trust_standing(100, 0).is_eligible
    assert trust_standing(None, None).needs_delta == 0
