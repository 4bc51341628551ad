"""
ATM Terminal

A single-account bank terminal core: PIN authentication with lockout,
fixed-point balances, and a hash-chained append-only ledger.
"""

__version__ = "1.0.0"
