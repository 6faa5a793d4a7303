#!/usr/bin/env python3
"""
Concurrency check for the one-spin-per-email rule.

Fires N simultaneous POST /api/spin requests for the same email against a
running server and reports how many were admitted. Exactly one should be.

Run from project root:
  python scripts/spin_load_test.py
  python scripts/spin_load_test.py --url http://localhost:3000 --email load@test.dev -n 50

Use a fresh email each run; a previously admitted email yields 0 admissions.
"""

from __future__ import annotations

import argparse
import sys
import uuid
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

# Run from project root; ensure spinwheel is importable
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

import requests

from spinwheel.core.rewards import pick_segment

DEFAULT_URL = "http://localhost:3000"
REQUEST_TIMEOUT = 30


def submit(url: str, name: str, email: str) -> tuple[int, dict]:
    segment = pick_segment()
    response = requests.post(
        f"{url.rstrip('/')}/api/spin",
        json={
            "name": name,
            "email": email,
            "domain": segment.domain,
            "discount": segment.discount,
            "couponCode": segment.coupon_code,
        },
        timeout=REQUEST_TIMEOUT,
    )
    try:
        body = response.json()
    except ValueError:
        body = {"message": response.text}
    return response.status_code, body


def main() -> int:
    parser = argparse.ArgumentParser(description="Hammer /api/spin with one email from many threads.")
    parser.add_argument("--url", default=DEFAULT_URL, help=f"Server base URL (default {DEFAULT_URL})")
    parser.add_argument("--email", default=None, help="Email to submit (default: random @loadtest.dev address)")
    parser.add_argument("--name", default="Load Test", help="Display name to submit")
    parser.add_argument("-n", "--requests", type=int, default=20, help="Number of concurrent submissions")
    args = parser.parse_args()

    email = args.email or f"load-{uuid.uuid4().hex[:8]}@loadtest.dev"
    # Vary the case so normalization is exercised too
    variants = [email.upper() if i % 2 else email for i in range(args.requests)]

    print(f"▶ Sending {args.requests} concurrent spins for {email} to {args.url}")
    try:
        with ThreadPoolExecutor(max_workers=args.requests) as pool:
            results = list(pool.map(lambda e: submit(args.url, args.name, e), variants))
    except requests.exceptions.RequestException as e:
        print(f"❌ Request failed: {e}")
        return 2

    outcomes = Counter()
    for status_code, body in results:
        if body.get("allowed"):
            outcomes["allowed"] += 1
        else:
            outcomes[f"{status_code} {body.get('message', '')}".strip()] += 1

    for outcome, count in outcomes.most_common():
        print(f"  {count:>4} × {outcome}")

    if outcomes["allowed"] > 1:
        print(f"❌ {outcomes['allowed']} spins admitted for one email")
        return 1
    print(f"✅ {outcomes['allowed']} spin admitted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
