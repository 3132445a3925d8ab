#!/usr/bin/env python3
"""Diagnostic script to check the trust-core configuration."""

import os

from kleo_trust import AddressCodec, InvalidFormat, load_settings
from kleo_trust.config import (
    MAX_TRUST_EVENTS_ENV,
    MAX_TRUST_WALLETS_ENV,
    SS58_PREFIX_ENV,
    TRUST_ORACLE_ADDRESS_ENV,
)
from kleo_trust.constants import DEFAULT_ENV_FILE
from kleo_trust.loan_tiers import all_tiers, describe_tier
from kleo_trust.logging_utils import LOG_LEVEL_ENV


def main():
    print("=" * 60)
    print("Trust Core Configuration Diagnostic")
    print("=" * 60)

    if DEFAULT_ENV_FILE.exists():
        print(f"\n✓ Found .env file: {DEFAULT_ENV_FILE}")
    else:
        print(f"\n○ No .env file at {DEFAULT_ENV_FILE} (using process environment)")

    settings = load_settings(DEFAULT_ENV_FILE)
    issues = []

    print("\n" + "=" * 60)
    print("1. Environment Variables Check")
    print("=" * 60)

    optional_vars = {
        SS58_PREFIX_ENV: "SS58 network prefix",
        MAX_TRUST_EVENTS_ENV: "Trust feed size",
        MAX_TRUST_WALLETS_ENV: "Trusted wallets shown",
        LOG_LEVEL_ENV: "Log level",
        TRUST_ORACLE_ADDRESS_ENV: "Watched TrustOracle contract",
    }
    for var, desc in optional_vars.items():
        value = os.getenv(var)
        if value:
            print(f"  ✓ {var:30} = {value}")
        else:
            print(f"  ○ {var:30} = not set ({desc}, default used)")

    print("\n" + "=" * 60)
    print("2. Effective Settings")
    print("=" * 60)
    print(f"  SS58 prefix        : {settings.ss58_prefix}")
    print(f"  Max trust events   : {settings.max_trust_events}")
    print(f"  Max trust wallets  : {settings.max_trust_wallets}")
    print(f"  Log level          : {settings.log_level}")

    try:
        codec = AddressCodec(settings.ss58_prefix)
    except InvalidFormat as exc:
        issues.append(f"{SS58_PREFIX_ENV}: {exc}")
        codec = AddressCodec()

    print("\n" + "=" * 60)
    print("3. TrustOracle Address")
    print("=" * 60)
    if settings.trust_oracle_address:
        try:
            described = codec.describe(settings.trust_oracle_address)
            print(f"  ✓ H160 : {described.short}")
            print(f"  ✓ SS58 : {described.network}")
        except InvalidFormat as exc:
            print(f"  ✗ {settings.trust_oracle_address}: {exc}")
            issues.append(f"{TRUST_ORACLE_ADDRESS_ENV} is not a valid H160 or SS58 address")
    else:
        print("  ○ not set; the event feed cannot show which contract it watches")

    print("\n" + "=" * 60)
    print("4. Loan Tiers")
    print("=" * 60)
    for req in all_tiers():
        print(f"  {describe_tier(req.tier)}")

    print("\n" + "=" * 60)
    print("Summary")
    print("=" * 60)
    if issues:
        print(f"\n⚠️  Found {len(issues)} issue(s) to fix:\n")
        for i, issue in enumerate(issues, 1):
            print(f"  {i}. {issue}")
    else:
        print("\n✓ Configuration looks good")


if __name__ == "__main__":
    main()
