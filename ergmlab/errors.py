"""Error taxonomy shared by every ergmlab component.

Structural errors and malformed terms are raised immediately. Undefined
segregation measures (a zero denominator) are not errors: they come back as
NaN so that a comparison across many group pairs still completes.
"""


class ErgmError(Exception):
    """Base class for all ergmlab errors."""


class InvalidArgument(ErgmError, ValueError):
    """Malformed structural input: bad indices, node counts or group counts."""


class UnknownTerm(ErgmError):
    """Raised when a term name is not one of the recognized kinds."""


class InvalidParameter(ErgmError, ValueError):
    """Raised when a term's parameters do not fit its kind."""


class MissingAttribute(ErgmError, KeyError):
    """Raised when a referenced node attribute is absent on some node."""

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0]) if self.args else ""


class ResourceLimitExceeded(ErgmError):
    """Raised when an enumeration request exceeds the configured size cap."""
