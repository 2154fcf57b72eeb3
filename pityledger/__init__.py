"""
Pity Ledger

Deterministic replay of gacha pull history into per-banner pity state.
"""

__version__ = "0.1.0"
