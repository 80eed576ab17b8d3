#!/usr/bin/env python3
"""Print the Razorpay-style signature for an order/payment id pair.

Handy for exercising POST /api/verify-payment locally without completing
a real checkout:

  RAZORPAY_KEY_SECRET=... python scripts/sign_test_payment.py order_X pay_Y

The printed JSON body can be posted as-is to /api/verify-payment.
"""

from __future__ import annotations

import argparse
import json
import os
import sys

from dotenv import load_dotenv

from coldreach.signature import compute_signature


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("order_id")
    parser.add_argument("payment_id")
    parser.add_argument("--email", default="test@example.com")
    parser.add_argument("--plan", default="starter")
    args = parser.parse_args()

    load_dotenv()
    secret = os.environ.get("RAZORPAY_KEY_SECRET")
    if not secret:
        print("Error: RAZORPAY_KEY_SECRET is not set.", file=sys.stderr)
        sys.exit(1)

    body = {
        "razorpay_order_id": args.order_id,
        "razorpay_payment_id": args.payment_id,
        "razorpay_signature": compute_signature(args.order_id, args.payment_id, secret),
        "email": args.email,
        "plan": args.plan,
    }
    print(json.dumps(body, indent=2))


if __name__ == "__main__":
    main()
