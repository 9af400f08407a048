"""A rate limiter hook."""

from __future__ import annotations

import sys
from typing import TextIO


class RateLimiter:
    """Announces rate-limit enforcement."""

    def enforce_limit(self, out: TextIO | None = None) -> None:
        print("Enforcing rate limit...", file=out if out is not None else sys.stdout)