"""
Protocol errors.

Every failure of a protocol step is raised to the caller; nothing in the core
retries or falls back silently.
"""


class TokenProtocolError(Exception):
    """Base class of all protocol failures."""


class IndexMismatch(TokenProtocolError, ValueError):
    """Arithmetic between shares evaluated at different indices."""


class DegenerateInterpolation(TokenProtocolError, ValueError):
    """Duplicate evaluation points make a Lagrange denominator vanish."""


class InvalidRegistration(TokenProtocolError):
    """Unknown location/profile or a failed pairing-consistency check."""


class ReplayRejected(TokenProtocolError):
    """Sequence number not increasing or timestamp outside the replay window."""


class SignatureInvalid(TokenProtocolError):
    """A Schnorr signature did not verify."""


class SessionNotFound(TokenProtocolError):
    """Unknown or already consumed session."""


ERROR_TYPES = {
    cls.__name__: cls
    for cls in (IndexMismatch, DegenerateInterpolation, InvalidRegistration,
                ReplayRejected, SignatureInvalid, SessionNotFound)
}
