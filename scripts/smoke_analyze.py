"""Send a sample analysis request to a running server and print the report.

Usage: python scripts/smoke_analyze.py [BASE_URL]

BASE_URL defaults to http://localhost:$PORT (PORT defaults to 10000). The
sample profile is synthetic.
"""

from __future__ import annotations

import json
import os
import sys

import httpx

_SAMPLE_REQUEST = {
    "client_id": "smoke-test",
    "service": "linkedin_optimization",
    "data": {
        "name": "Sample Freelancer",
        "email": "freelancer@example.com",
        "goals": "grow SaaS audience",
        "pain_points": "low engagement",
    },
}


def main() -> None:
    """Entry point."""
    port = os.getenv("PORT", "10000")
    base_url = sys.argv[1] if len(sys.argv) > 1 else f"http://localhost:{port}"

    with httpx.Client(base_url=base_url, timeout=600.0) as client:
        health = client.get("/health")
        health.raise_for_status()
        print(f"Health: {health.json()}")

        res = client.post("/api/analyze", json=_SAMPLE_REQUEST)
        print(f"Status: {res.status_code}")
        print(json.dumps(res.json(), indent=2, ensure_ascii=False))

    if res.status_code != 200:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
