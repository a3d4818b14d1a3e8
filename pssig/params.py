""" The algebraic setting shared by all PS operations.

A ``PSParams`` bundles the pairing group, its order, both generators and the
pairing map, together with the configuration that signers and verifiers must
agree on (the curve and the way messages become scalars).

Example:
    >>> params = setup()
    >>> G, o, g1, g2, e = params
    >>> e(g1, g2) == e(g1, g2)
    True
    >>> m = encode_message(params, b"Hello")
    >>> 0 <= m < o
    True

Randomness is always passed in explicitly as a *source*: a callable that,
given the group order, returns a ``Bn`` in [0, order).

    >>> src = SeededSource(b"doctest")
    >>> src(params.o) == SeededSource(b"doctest")(params.o)
    True

"""

import logging
from hashlib import sha256

from bplib.bp import BpGroup
from petlib.bn import Bn

from .errors import EncodingError

__all__ = ["PSParams", "setup", "default_source", "SeededSource",
           "fresh_sources", "nonzero_scalar", "scalar_to_bytes",
           "scalar_from_bytes", "encode_message", "MESSAGE_ENCODINGS"]

_logger = logging.getLogger(__name__)

MESSAGE_ENCODINGS = ("raw", "sha256")


class PSParams(object):
    """ The group setting and configuration of a PS deployment. """

    def __init__(self, G, message_encoding="raw"):
        if message_encoding not in MESSAGE_ENCODINGS:
            raise ValueError("Unknown message encoding: %r" % (message_encoding,))

        self.G = G
        self.nid = G.nid
        self.o = G.order()
        self.g1 = G.gen1()
        self.g2 = G.gen2()
        self.e = G.pair
        self.message_encoding = message_encoding
        self.scalar_len = (self.o.num_bits() + 7) // 8

    def __iter__(self):
        return iter((self.G, self.o, self.g1, self.g2, self.e))

    def __repr__(self):
        return "PSParams(nid=%s, message_encoding=%r)" % (self.nid, self.message_encoding)


def setup(nid=None, optimize_mult=True, message_encoding="raw"):
    """ Builds the PS parameters over a pairing-friendly curve.

    Args:
        nid (int): the curve identifier, or None for the library default (BN254).
        optimize_mult (bool): precompute tables for generator multiplication.
        message_encoding (str): "raw" reduces message bytes modulo the group
            order; "sha256" hashes them first.

    Returns:
        PSParams: the shared parameters.
    """
    if nid is None:
        G = BpGroup(optimize_mult=optimize_mult)
    else:
        G = BpGroup(nid, optimize_mult)

    params = PSParams(G, message_encoding)
    _logger.debug("PS setup on curve nid=%s, message encoding %s",
                  params.nid, message_encoding)
    return params


def default_source(order):
    """ Draws a uniform scalar below ``order`` from the OpenSSL generator. """
    return order.random()


class SeededSource(object):
    """ A deterministic randomness source, for reproducible tests.

    Each call hashes the seed with an incrementing counter and reduces the
    digest modulo the order. Never use it to produce real keys.
    """

    def __init__(self, seed):
        if isinstance(seed, str):
            seed = seed.encode("utf8")
        self.seed = seed
        self.counter = 0

    def __call__(self, order):
        block = sha256(self.seed + self.counter.to_bytes(8, "big")).digest()
        block += sha256(block).digest()
        self.counter += 1
        return Bn.from_binary(block) % order


def fresh_sources(r):
    """ Returns ``r`` independent default sources, one per key component. """
    return [default_source] * r


def nonzero_scalar(params, source=None):
    """ Draws a scalar in [1, order) from ``source``. """
    if source is None:
        source = default_source

    k = source(params.o)
    while k == 0:
        k = source(params.o)
    return k


def scalar_to_bytes(params, k):
    """ The canonical fixed-width big-endian encoding of a scalar. """
    if not (0 <= k < params.o):
        raise EncodingError("Scalar out of range")

    data = k.binary()
    return b"\x00" * (params.scalar_len - len(data)) + data


def scalar_from_bytes(params, data):
    """ Decodes a canonical scalar, rejecting wrong widths and values >= order. """
    if not isinstance(data, bytes) or len(data) != params.scalar_len:
        raise EncodingError("Scalar must be %d bytes" % params.scalar_len)

    k = Bn.from_binary(data)
    if not k < params.o:
        raise EncodingError("Scalar not reduced modulo the group order")
    return k


def encode_message(params, message):
    """ Maps a message to a scalar, as configured by ``params.message_encoding``.

    With the "raw" encoding, distinct messages that agree modulo the group
    order map to the same scalar.
    """
    if isinstance(message, str):
        message = message.encode("utf8")
    if not isinstance(message, bytes):
        raise TypeError("Messages must be bytes or str, not %s" % type(message).__name__)

    if params.message_encoding == "sha256":
        message = sha256(message).digest()

    if not message:
        return Bn(0)
    return Bn.from_binary(message) % params.o


# --- TESTS ---

import pytest


def test_setup():
    params = setup()
    G, o, g1, g2, e = params
    assert params.nid == G.nid
    assert params.scalar_len == 32
    assert e(g1, g2) == e(g1, g2)


def test_setup_bad_encoding():
    with pytest.raises(ValueError):
        setup(message_encoding="sha3")


def test_scalar_bytes():
    params = setup()
    k = params.o.random()
    data = scalar_to_bytes(params, k)
    assert len(data) == params.scalar_len
    assert scalar_from_bytes(params, data) == k

    assert scalar_to_bytes(params, Bn(0)) == b"\x00" * params.scalar_len


def test_scalar_bytes_errors():
    params = setup()
    with pytest.raises(EncodingError):
        scalar_to_bytes(params, params.o)

    with pytest.raises(EncodingError):
        scalar_from_bytes(params, b"\x01" * (params.scalar_len - 1))

    with pytest.raises(EncodingError):
        scalar_from_bytes(params, b"\xff" * params.scalar_len)


def test_encode_message_raw():
    params = setup()
    assert encode_message(params, b"") == 0
    assert encode_message(params, b"\x01\x00") == 256
    assert encode_message(params, "Hello") == encode_message(params, b"Hello")

    # Reduction modulo the order
    long_msg = params.o.binary()
    assert encode_message(params, long_msg) == 0

    with pytest.raises(TypeError):
        encode_message(params, 42)


def test_encode_message_sha256():
    params = setup(message_encoding="sha256")
    expected = Bn.from_binary(sha256(b"Hello").digest()) % params.o
    assert encode_message(params, b"Hello") == expected


def test_seeded_source():
    params = setup()
    src1, src2 = SeededSource("seed"), SeededSource(b"seed")
    a = [src1(params.o) for _ in range(3)]
    b = [src2(params.o) for _ in range(3)]
    assert a == b
    assert a[0] != a[1]
    assert all(0 <= x < params.o for x in a)


def test_nonzero_scalar():
    params = setup()
    draws = iter([Bn(0), Bn(0), Bn(7)])
    assert nonzero_scalar(params, lambda o: next(draws)) == 7
    assert nonzero_scalar(params) != 0
