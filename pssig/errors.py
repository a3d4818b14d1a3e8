""" Exceptions raised by the PS signature operations.

All errors derive from ``PSError``. Verification failures of any kind
surface as ``InvalidSignature``; a signature whose bytes do not even decode
raises ``MalformedSignature``, which is both an ``InvalidSignature`` and an
``EncodingError``:

    >>> issubclass(MalformedSignature, InvalidSignature)
    True
    >>> issubclass(MalformedSignature, EncodingError)
    True

"""

__all__ = ["PSError", "InsufficientRandomness", "EncodingError",
           "InvalidSignature", "MalformedSignature", "SlotMismatch"]


class PSError(Exception):
    """Base class for all pssig errors."""


class InsufficientRandomness(PSError):
    """Fewer than two randomness sources were given to the key generator."""


class EncodingError(PSError):
    """A scalar or a group element failed to serialise or deserialise."""


class InvalidSignature(PSError):
    """The pairing equation does not hold for this signature."""


class MalformedSignature(EncodingError, InvalidSignature):
    """The signature bytes are not valid G1 encodings."""


class SlotMismatch(PSError, ValueError):
    """Messages and key slots disagree in number or index."""


# --- TESTS ---

def test_hierarchy():
    for cls in [InsufficientRandomness, EncodingError, InvalidSignature, SlotMismatch]:
        assert issubclass(cls, PSError)

    assert issubclass(SlotMismatch, ValueError)


def test_malformed_caught_as_invalid():
    import pytest

    with pytest.raises(InvalidSignature):
        raise MalformedSignature("bad point")

    with pytest.raises(EncodingError):
        raise MalformedSignature("bad point")
