""" Key generation for PS signatures.

A key with ``r`` components signs vectors of up to ``r - 1`` messages. The
private key is ``(x, y_1, ..., y_{r-1})`` and the public key is
``(x*g2, y_1*g2, ..., y_{r-1}*g2)``.

Example:
    >>> from pssig.params import setup, fresh_sources
    >>> params = setup()
    >>> sk, pk = keygen(params, fresh_sources(3))
    >>> len(sk), len(pk), sk.slots
    (3, 3, 2)
    >>> pk == sk.public_key(params)
    True

"""

import logging

from bplib.bp import G2Elem

from .errors import InsufficientRandomness, EncodingError, SlotMismatch
from .params import scalar_to_bytes, scalar_from_bytes

__all__ = ["PrivateKey", "PublicKey", "keygen", "bind_messages"]

_logger = logging.getLogger(__name__)


class PrivateKey(tuple):
    """ The secret scalars ``(x, y_1, ..., y_{r-1})``. """

    def __new__(cls, components):
        components = tuple(components)
        if len(components) < 2:
            raise SlotMismatch("A PS key needs at least two components")
        return tuple.__new__(cls, components)

    @property
    def x(self):
        return self[0]

    @property
    def ys(self):
        return self[1:]

    @property
    def slots(self):
        """ The number of message slots this key can sign. """
        return len(self) - 1

    def public_key(self, params):
        """ Recomputes the matching public key. """
        return PublicKey([k * params.g2 for k in self])

    def export(self, params):
        """ The canonical byte encodings of all components. """
        return [scalar_to_bytes(params, k) for k in self]

    @staticmethod
    def from_bytes(blobs, params):
        return PrivateKey([scalar_from_bytes(params, b) for b in blobs])

    def __repr__(self):
        return "PrivateKey(<%d components>)" % len(self)


class PublicKey(tuple):
    """ The public points ``(X, Y_1, ..., Y_{r-1})`` in G2. """

    def __new__(cls, components):
        components = tuple(components)
        if len(components) < 2:
            raise SlotMismatch("A PS key needs at least two components")
        return tuple.__new__(cls, components)

    @property
    def X(self):
        return self[0]

    @property
    def Ys(self):
        return self[1:]

    @property
    def slots(self):
        return len(self) - 1

    def __eq__(self, other):
        if not isinstance(other, PublicKey) or len(self) != len(other):
            return False
        return all(a == b for a, b in zip(self, other))

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(tuple(p.export() for p in self))

    def export(self):
        """ The canonical byte encodings of all points. """
        try:
            return [p.export() for p in self]
        except Exception as exc:  # pylint: disable=broad-except
            raise EncodingError("Cannot export public key point") from exc

    @staticmethod
    def from_bytes(blobs, params):
        points = []
        for blob in blobs:
            try:
                points.append(G2Elem.from_bytes(blob, params.G))
            except Exception as exc:  # pylint: disable=broad-except
                raise EncodingError("Invalid G2 point in public key") from exc
        return PublicKey(points)


def keygen(params, sources):
    """ Generates a PS key pair with one component per randomness source.

    Args:
        params (PSParams): the group setting.
        sources (list): randomness sources, each called exactly once. The
            first yields ``x``, the others ``y_1, ..., y_{r-1}``.

    Returns:
        (PrivateKey, PublicKey): the key pair.

    Raises:
        InsufficientRandomness: if fewer than two sources are given.
        EncodingError: if a drawn scalar has no canonical encoding.
    """
    sources = list(sources)
    if len(sources) < 2:
        raise InsufficientRandomness("Need at least two randomness sources, got %d" % len(sources))

    blobs = [scalar_to_bytes(params, source(params.o)) for source in sources]
    sk = PrivateKey.from_bytes(blobs, params)
    pk = sk.public_key(params)

    _logger.debug("Generated PS key pair with %d message slots", sk.slots)
    return sk, pk


def bind_messages(key, messages):
    """ Pairs every message with the key slot it is signed under.

    ``messages`` is either a sequence, where message ``j`` binds slot
    ``j + 1``, or a mapping from slot index to message.

    Returns:
        list: ``(slot, message)`` pairs ordered by slot.

    Raises:
        SlotMismatch: on an empty vector, too many messages or a slot
            outside ``1 .. len(key) - 1``.
    """
    if isinstance(messages, (bytes, str)):
        raise TypeError("Expected a sequence or mapping of messages, not a single message")

    if hasattr(messages, "items"):
        pairs = sorted(messages.items())
    else:
        pairs = list(enumerate(messages, 1))

    if not pairs:
        raise SlotMismatch("No messages given")

    slots = len(key) - 1
    if len(pairs) > slots:
        raise SlotMismatch("%d messages but the key has %d slots" % (len(pairs), slots))

    for slot, _ in pairs:
        if not isinstance(slot, int) or not 1 <= slot <= slots:
            raise SlotMismatch("Slot %r outside 1..%d" % (slot, slots))

    return pairs


# --- TESTS ---

import pytest

from .params import setup, fresh_sources, SeededSource


def test_keygen_lengths():
    params = setup()
    for r in [2, 3, 5]:
        sk, pk = keygen(params, fresh_sources(r))
        assert len(sk) == len(pk) == r
        assert isinstance(sk, PrivateKey) and isinstance(pk, PublicKey)


def test_keygen_correspondence():
    params = setup()
    sk, pk = keygen(params, fresh_sources(4))
    for k, P in zip(sk, pk):
        assert k * params.g2 == P
    assert pk.X == sk.x * params.g2


def test_keygen_insufficient():
    params = setup()
    for r in [0, 1]:
        with pytest.raises(InsufficientRandomness):
            keygen(params, fresh_sources(r))


def test_keygen_sources_used_once():
    params = setup()
    calls = []

    def counting(order):
        calls.append(1)
        return order.random()

    keygen(params, [counting] * 3)
    assert len(calls) == 3


def test_keygen_bad_source():
    params = setup()
    with pytest.raises(EncodingError):
        keygen(params, [lambda o: o, lambda o: o.random()])


def test_keygen_seeded():
    params = setup()
    sk1, pk1 = keygen(params, [SeededSource(b"a"), SeededSource(b"b")])
    sk2, pk2 = keygen(params, [SeededSource(b"a"), SeededSource(b"b")])
    assert sk1 == sk2
    assert pk1 == pk2


def test_key_export():
    params = setup()
    sk, pk = keygen(params, fresh_sources(3))
    assert PrivateKey.from_bytes(sk.export(params), params) == sk
    assert PublicKey.from_bytes(pk.export(), params) == pk

    with pytest.raises(EncodingError):
        PublicKey.from_bytes([b"\x01\x02\x03"] * 2, params)


def test_key_too_short():
    with pytest.raises(SlotMismatch):
        PrivateKey([1])
    with pytest.raises(SlotMismatch):
        PublicKey([])


def test_bind_messages():
    params = setup()
    sk, _ = keygen(params, fresh_sources(4))

    assert bind_messages(sk, [b"a", b"b"]) == [(1, b"a"), (2, b"b")]
    assert bind_messages(sk, {3: b"c", 1: b"a"}) == [(1, b"a"), (3, b"c")]

    with pytest.raises(SlotMismatch):
        bind_messages(sk, [])
    with pytest.raises(SlotMismatch):
        bind_messages(sk, [b"a", b"b", b"c", b"d"])
    with pytest.raises(SlotMismatch):
        bind_messages(sk, {0: b"a"})
    with pytest.raises(SlotMismatch):
        bind_messages(sk, {4: b"a"})
    with pytest.raises(TypeError):
        bind_messages(sk, b"abc")
