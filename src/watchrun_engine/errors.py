"""Exceptions raised by watchrun_engine."""


class WatchrunError(Exception):
    """Base class for all watchrun errors."""


class ConfigError(WatchrunError):
    """Configuration is missing, empty or unparsable. Fatal at startup."""


class WatchSetupError(WatchrunError):
    """The event source could not attach to the watched directory. Fatal at startup."""


class WatchSourceError(WatchrunError):
    """A single event delivery failed. The watch loop logs it and continues."""


class WatchSourceDisconnected(WatchrunError):
    """The event source is gone for good. Ends the watch loop."""
