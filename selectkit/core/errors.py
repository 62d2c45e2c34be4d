"""Exception types raised by selectkit.

The state container itself never raises on data; these cover the
surrounding configuration layer.
"""


class SelectKitError(Exception):
    """Base class for selectkit errors."""


class ConfigurationError(SelectKitError, ValueError):
    """Merged configuration failed validation."""
