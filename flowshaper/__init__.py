"""Prioritised, rate-limited flow queues for incoming UDP packets, with a test sender."""

__version__ = "0.1.0"