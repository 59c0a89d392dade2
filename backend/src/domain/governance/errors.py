"""Exceptions raised by the governance engine."""


class GovernanceError(Exception):
    """Base class for governance engine errors."""
    pass


class StateTransitionError(GovernanceError):
    """Raised when an invalid status transition is attempted."""
    pass


class UnknownEntityKindError(GovernanceError):
    """Raised when no evaluator or transition table exists for an entity kind."""
    pass


class DataAccessError(GovernanceError):
    """Raised by data-access adapters when a read fails."""
    pass
