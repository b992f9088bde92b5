"""Exception classes for SubTracker."""


class SubTrackerError(Exception):
    """Base exception for all SubTracker errors."""
    pass


class InvalidSubscription(SubTrackerError):
    """Raised when a subscription record breaks its invariants."""
    pass


class StoreError(SubTrackerError):
    """Raised when the subscription store cannot read or write."""
    pass


class ConfigurationError(SubTrackerError):
    """Raised when there's a configuration error."""
    pass
