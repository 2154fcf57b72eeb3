"""
Test suite for the pity replay engine.

Focus areas:
- Ordering and validation
- Per-banner state machine rules
- Replay determinism and banner isolation
- Statistics derived from replay
- Pull log storage and CLI
"""
