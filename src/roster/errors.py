"""Exception types raised at the edges of the roster engine."""


class RosterError(Exception):
    """Base class for roster engine errors."""


class RosterSourceError(RosterError):
    """A roster source could not load or fetch records."""


class ConfigError(RosterError):
    """Engine configuration failed validation."""
