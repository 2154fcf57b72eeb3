"""
Exception types for the pity replay engine.
"""


class PityLedgerError(Exception):
    """Base class for all pity ledger errors."""
    pass


class EventValidationError(PityLedgerError):
    """Raised when a pull event is malformed (missing field, value outside its closed set)."""
    pass


class UnknownBannerError(EventValidationError):
    """Raised when a pull event names a banner outside the known categories."""
    pass


class DuplicateEventError(EventValidationError):
    """Raised when the same id or external_id appears twice in one replay input."""
    pass


class InvalidTransitionError(PityLedgerError):
    """Raised when no state machine is registered for a banner."""
    pass


class PullLogError(PityLedgerError):
    """Raised when pull log storage operations fail."""
    pass
