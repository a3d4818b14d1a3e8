""" Sequential aggregation of PS signatures.

The first signer, holding ``(x, y_1)``, starts a chain over message ``m_1``
with ``aggregate_initiate``. Each following signer ``i`` knows only its own
``y_i`` and extends the chain over ``m_i`` with ``aggregate_extend``. The
final pair verifies with ``batch_verify`` against the full public key and the
messages in slot order.

Example:
    >>> from pssig.params import setup, fresh_sources
    >>> from pssig.keys import keygen
    >>> from pssig.verifier import is_valid
    >>> params = setup()
    >>> sk, pk = keygen(params, fresh_sources(3))
    >>> chain = aggregate_initiate(params, sk, b"issuer")
    >>> chain = aggregate_extend(params, sk[2], chain, b"witness")
    >>> is_valid(params, pk, [b"issuer", b"witness"], chain)
    True

"""

import logging

from .params import nonzero_scalar, encode_message
from .signature import Signature

__all__ = ["aggregate_initiate", "aggregate_extend"]

_logger = logging.getLogger(__name__)


def aggregate_initiate(params, sk, message, source=None):
    """ Starts an aggregation chain: ``(t*g1, t*(x + y_1*m)*g1)``.

    Only ``sk[0]`` and ``sk[1]`` are used. Unlike ``sign``, the first
    component is an explicit power of the generator.
    """
    o = params.o
    t = nonzero_scalar(params, source)
    m = encode_message(params, message)

    v = sk[0].mod_add(sk[1].mod_mul(m, o), o).mod_mul(t, o)
    return Signature.from_points(t * params.g1, v * params.g1)


def aggregate_extend(params, y, signature, message, source=None):
    """ Extends an aggregation chain with one more message.

    Args:
        params (PSParams): the group setting.
        y (Bn): this signer's secret for its slot.
        signature (Signature): the chain so far.
        message (bytes): the message bound to this signer's slot.
        source: a randomness source, or None for the default one.

    Returns:
        Signature: ``(t*sigma1, t*(y*m*sigma1 + sigma2))`` for a fresh ``t``.

    Raises:
        MalformedSignature: if the incoming chain does not decode.
    """
    sig1, sig2 = signature.points(params)
    t = nonzero_scalar(params, source)
    e = y.mod_mul(encode_message(params, message), params.o)

    new_sig2 = t * (e * sig1 + sig2)
    _logger.debug("Extended aggregate signature by one message")
    return Signature.from_points(t * sig1, new_sig2)


# --- TESTS ---

import pytest

from .errors import MalformedSignature
from .keys import keygen
from .params import setup, fresh_sources


def test_initiate_shape():
    params = setup()
    sk, _ = keygen(params, fresh_sources(2))
    sig = aggregate_initiate(params, sk, b"m1", source=lambda o: 3)
    s1, s2 = sig.points(params)
    m = encode_message(params, b"m1")
    assert s1 == 3 * params.g1
    assert s2 == (sk.x + sk[1] * m) * s1


def test_extend_shape():
    params = setup()
    sk, _ = keygen(params, fresh_sources(3))
    sig = aggregate_initiate(params, sk, b"m1")
    ext = aggregate_extend(params, sk[2], sig, b"m2")

    s1, s2 = ext.points(params)
    m1, m2 = encode_message(params, b"m1"), encode_message(params, b"m2")
    assert s2 == (sk.x + sk[1] * m1 + sk[2] * m2) * s1


def test_extend_rerandomises():
    params = setup()
    sk, _ = keygen(params, fresh_sources(3))
    sig = aggregate_initiate(params, sk, b"m1")
    ext1 = aggregate_extend(params, sk[2], sig, b"m2")
    ext2 = aggregate_extend(params, sk[2], sig, b"m2")
    assert ext1.sigma1 != sig.sigma1
    assert ext1.sigma1 != ext2.sigma1


def test_extend_malformed():
    params = setup()
    with pytest.raises(MalformedSignature):
        aggregate_extend(params, params.o.random(), Signature(b"", b""), b"m")
