"""Registration and feedback backend for the MTN GITEX Nigeria event."""

__version__ = "1.0.0"
