"""
Pity Ledger CLI - pull history replay and pity tracking

Commands:
- pityledger replay - Replay the pull log and show per-banner state
- pityledger pity - Current pity per banner
- pityledger stats - Banner statistics
- pityledger log import/tail/compact - Pull log operations
"""

__version__ = "0.1.0"
