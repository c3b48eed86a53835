"""Messaging: report emails built from a forecast.

- composer.py: default subject/body and recipient validation
- outbox.py: simulated delivery (in-memory, no network)
"""
