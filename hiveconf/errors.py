"""
Error taxonomy for the hiveconf package.

Every error raised by hiveconf derives from HiveconfError, and also from the
builtin exception a caller would naturally catch (ValueError, LookupError,
TypeError...), so both styles of handling work.
"""


class HiveconfError(Exception):
    """Base class for hiveconf failures."""


class InvalidBaseAddress(HiveconfError, ValueError):
    """Raised when a provider's base address is not an absolute container address."""


class InvalidPath(HiveconfError, ValueError):
    """Raised when an address denotes a container where a leaf is expected, or vice versa."""


class UnknownSelector(HiveconfError, ValueError):
    """Raised when a root or access-mode token (or identifier) is not recognized."""


class UnknownRoot(UnknownSelector):
    """Raised by a store that cannot open the requested root."""


class ContainerNotFound(HiveconfError, LookupError):
    """Raised when listing a container that does not exist."""


class TypeMismatch(HiveconfError, TypeError):
    """Raised when a value cannot be converted to or from its stored representation."""


class StoreUnavailable(HiveconfError, RuntimeError):
    """Raised when a store backend cannot be used on this platform."""


class StoreFormatError(HiveconfError, ValueError):
    """Raised when a persisted store document is malformed."""


class ConfigError(HiveconfError, ValueError):
    """Raised when the package configuration is invalid."""
