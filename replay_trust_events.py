#!/usr/bin/env python3
"""Thin wrapper to replay captured TrustOracle event batches through the trust core.

Parsing, aggregation and rendering live in the ``kleo_trust`` package; this
script only wires them to the command line.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from kleo_trust import AddressCodec, load_settings
from kleo_trust.constants import DEFAULT_ENV_FILE
from kleo_trust.event_file import parse_event_file
from kleo_trust.replay import render_eligibility, render_feed, replay_batches


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("event_file", type=Path, help="JSON lines file, one batch per line")
    parser.add_argument("--amount", type=float, help="loan amount to check eligibility for")
    parser.add_argument("--stars", type=int, default=None, help="borrower reputation stars")
    parser.add_argument("--vouchers", type=int, default=0, help="vouchers already received")
    args = parser.parse_args()

    if not args.event_file.exists():
        raise FileNotFoundError(f"Event file not found: {args.event_file}")

    settings = load_settings(DEFAULT_ENV_FILE)
    aggregator = replay_batches(parse_event_file(args.event_file), settings)
    print(render_feed(aggregator, AddressCodec(settings.ss58_prefix), settings.max_trust_wallets))

    if args.amount is not None:
        print()
        print(render_eligibility(args.amount, args.stars, args.vouchers))


if __name__ == "__main__":
    main()
