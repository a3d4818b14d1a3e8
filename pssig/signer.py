""" Signing and re-randomising PS signatures. For full details of the scheme see:

David Pointcheval, Olivier Sanders: Short Randomizable Signatures. CT-RSA 2016: 111-126

A signature on messages ``m_1, ..., m_k`` is ``(h, (x + sum y_i*m_i) * h)`` for a
fresh random ``h`` in G1.

Example:
    >>> from pssig.params import setup, fresh_sources
    >>> from pssig.keys import keygen
    >>> from pssig.verifier import is_valid
    >>> params = setup()
    >>> sk, pk = keygen(params, fresh_sources(3))
    >>> sig = batch_sign(params, sk, [b"age=42", b"city=London"])
    >>> is_valid(params, pk, [b"age=42", b"city=London"], sig)
    True
    >>> is_valid(params, pk, [b"age=42", b"city=London"], randomize(params, sig))
    True

"""

import logging

from .keys import bind_messages
from .params import nonzero_scalar, encode_message
from .signature import Signature

__all__ = ["sign", "batch_sign", "randomize"]

_logger = logging.getLogger(__name__)


def _exponent(params, sk, pairs):
    """ Computes x + sum y_i*m_i modulo the group order. """
    o = params.o
    total = sk.x
    for slot, msg in pairs:
        total = total.mod_add(sk[slot].mod_mul(encode_message(params, msg), o), o)
    return total


def sign(params, sk, message, source=None):
    """ Signs a single message under the first slot of ``sk``.

    Args:
        params (PSParams): the group setting.
        sk (PrivateKey): the signing key (only ``x`` and ``y_1`` are used).
        message (bytes): the message.
        source: a randomness source, or None for the default one.

    Returns:
        Signature: a fresh signature ``(h, (x + y_1*m) * h)``.
    """
    return batch_sign(params, sk, [message], source)


def batch_sign(params, sk, messages, source=None):
    """ Signs a vector of messages in one signature.

    ``messages`` is a sequence (message ``j`` goes to slot ``j + 1``) or a
    mapping from slot index to message. The same binding must be used to
    verify.
    """
    pairs = bind_messages(sk, messages)

    h = nonzero_scalar(params, source) * params.g1
    sig = _exponent(params, sk, pairs) * h

    _logger.debug("Signed %d message(s)", len(pairs))
    return Signature.from_points(h, sig)


def randomize(params, signature, source=None):
    """ Re-randomises a signature: ``(t*sigma1, t*sigma2)`` for a fresh ``t``.

    The result is valid for the same messages and key, and unlinkable to the
    input. Works for single, batch and aggregate signatures.
    """
    sig1, sig2 = signature.points(params)
    t = nonzero_scalar(params, source)
    return Signature.from_points(t * sig1, t * sig2)


# --- TESTS ---

import pytest

from .errors import SlotMismatch, MalformedSignature
from .keys import keygen, PrivateKey
from .params import setup, fresh_sources


def test_sign_shape():
    params = setup()
    sk, _ = keygen(params, fresh_sources(2))
    sig = sign(params, sk, b"Hello PS Signature")
    assert isinstance(sig, Signature)

    h, s = sig.points(params)
    m = encode_message(params, b"Hello PS Signature")
    assert s == (sk.x + sk[1] * m) * h


def test_sign_unlinkable():
    params = setup()
    sk, _ = keygen(params, fresh_sources(2))
    sig1 = sign(params, sk, b"Hello PS Signature")
    sig2 = sign(params, sk, b"Hello PS Signature")
    assert sig1.sigma1 != sig2.sigma1
    assert sig1 != sig2


def test_sign_source_injected():
    params = setup()
    sk, _ = keygen(params, fresh_sources(2))
    sig = sign(params, sk, b"msg", source=lambda o: 5)
    h, _ = sig.points(params)
    assert h == 5 * params.g1


def test_batch_sign_too_many():
    params = setup()
    sk, _ = keygen(params, fresh_sources(3))
    with pytest.raises(SlotMismatch):
        batch_sign(params, sk, [b"1", b"2", b"3"])


def test_batch_sign_prefix_key():
    params = setup()
    sk, _ = keygen(params, fresh_sources(4))
    short = PrivateKey(sk[:3])
    sig = batch_sign(params, short, [b"1", b"2"])
    h, s = sig.points(params)
    assert s == _exponent(params, sk, [(1, b"1"), (2, b"2")]) * h


def test_randomize():
    params = setup()
    sk, _ = keygen(params, fresh_sources(2))
    sig = sign(params, sk, b"Hello")
    sig2 = randomize(params, sig)
    assert sig2.sigma1 != sig.sigma1

    h, s = sig2.points(params)
    m = encode_message(params, b"Hello")
    assert s == (sk.x + sk[1] * m) * h


def test_randomize_malformed():
    params = setup()
    with pytest.raises(MalformedSignature):
        randomize(params, Signature(b"junk", b"junk"))
