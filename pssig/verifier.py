""" Verification of PS signatures, aggregates included.

A signature ``(sigma1, sigma2)`` on messages bound to slots ``i`` is accepted
iff ``sigma1`` is not the identity and

    e(sigma1, X + sum m_i*Y_i) == e(sigma2, g2)

Every failure raises ``InvalidSignature``; no finer diagnosis is given.
"""

import logging

from .errors import InvalidSignature
from .keys import bind_messages
from .params import encode_message

__all__ = ["verify", "batch_verify", "is_valid"]

_logger = logging.getLogger(__name__)


def verify(params, pk, message, signature):
    """ Verifies a signature on a single message (slot 1).

    Raises:
        InvalidSignature: if the signature does not verify.
        MalformedSignature: if a component does not decode.
    """
    batch_verify(params, pk, [message], signature)


def batch_verify(params, pk, messages, signature):
    """ Verifies a batch or aggregate signature on a vector of messages.

    Args:
        params (PSParams): the group setting.
        pk (PublicKey): the full public key.
        messages: a sequence of messages in slot order, or a mapping from
            slot index to message, bound exactly as when signing.
        signature (Signature): the signature.

    Raises:
        InvalidSignature: if the pairing equation does not hold.
        MalformedSignature: if a component does not decode.
        SlotMismatch: if the messages do not fit the key slots.
    """
    pairs = bind_messages(pk, messages)
    sig1, sig2 = signature.points(params)

    if sig1.isinf():
        raise InvalidSignature("Invalid signature")

    Xm = pk.X
    for slot, msg in pairs:
        Xm = Xm + encode_message(params, msg) * pk[slot]

    if not params.e(sig1, Xm) == params.e(sig2, params.g2):
        raise InvalidSignature("Invalid signature")

    _logger.debug("Verified signature on %d message(s)", len(pairs))


def is_valid(params, pk, messages, signature):
    """ Boolean form of ``batch_verify``. """
    try:
        batch_verify(params, pk, messages, signature)
    except InvalidSignature:
        return False
    return True


# --- TESTS ---

import pytest

from .aggregator import aggregate_initiate, aggregate_extend
from .errors import MalformedSignature, SlotMismatch
from .keys import keygen, PrivateKey
from .params import setup, fresh_sources
from .signer import sign, batch_sign, randomize
from .signature import Signature


def flip(signature, index, byte, bit=0):
    """ Returns a copy of ``signature`` with one bit of one component flipped. """
    parts = [bytearray(c) for c in signature]
    parts[index][byte] ^= 1 << bit
    return Signature(*(bytes(p) for p in parts))


def test_ps():
    params = setup()
    msg = b"Hello PS Signature"
    sk, pk = keygen(params, fresh_sources(2))
    sig = sign(params, sk, msg)
    verify(params, pk, msg, sig)


def test_ps_fail_sig():
    params = setup()
    msg = b"Hello PS Signature"
    sk, pk = keygen(params, fresh_sources(2))
    sig = sign(params, sk, msg)

    with pytest.raises(InvalidSignature):
        verify(params, pk, msg, flip(sig, 0, 0))


def test_ps_wrong_message_or_key():
    params = setup()
    sk, pk = keygen(params, fresh_sources(2))
    _, pk2 = keygen(params, fresh_sources(2))
    sig = sign(params, sk, b"Hello World!")

    with pytest.raises(InvalidSignature):
        verify(params, pk, b"Other Hello World!", sig)
    with pytest.raises(InvalidSignature):
        verify(params, pk2, b"Hello World!", sig)
    with pytest.raises(InvalidSignature):
        verify(params, pk, b"Hello World!", Signature(sig.sigma2, sig.sigma1))


@pytest.mark.parametrize("index", [0, 1])
def test_ps_tamper_any_bit(index):
    params = setup()
    msg = b"Hello PS Signature"
    sk, pk = keygen(params, fresh_sources(2))
    sig = sign(params, sk, msg)

    length = len(sig[index])
    for byte in [0, 1, length // 2, length - 1]:
        for bit in [0, 3, 7]:
            with pytest.raises(InvalidSignature):
                verify(params, pk, msg, flip(sig, index, byte, bit))


def test_ps_malformed_is_encoding_error():
    params = setup()
    sk, pk = keygen(params, fresh_sources(2))
    sig = sign(params, sk, b"msg")

    with pytest.raises(MalformedSignature):
        verify(params, pk, b"msg", Signature(sig.sigma1[:-1], sig.sigma2))


def test_ps_identity_rejected():
    params = setup()
    _, pk = keygen(params, fresh_sources(2))
    zero = 0 * params.g1
    forged = Signature(zero.export(), zero.export())

    with pytest.raises(InvalidSignature):
        verify(params, pk, b"anything", forged)


def test_batch_ps_sig():
    params = setup()
    sk, pk = keygen(params, fresh_sources(4))
    msgs = [("PS Batch Verify %d" % j).encode() for j in range(1, 3)]

    sig = batch_sign(params, PrivateKey(sk[:3]), msgs)
    batch_verify(params, pk, msgs, sig)


def test_batch_ps_fail_sig():
    params = setup()
    sk, pk = keygen(params, fresh_sources(4))
    msgs = [("PS Batch Verify %d" % j).encode() for j in range(1, 3)]

    sig = batch_sign(params, PrivateKey(sk[:3]), msgs)
    with pytest.raises(InvalidSignature):
        batch_verify(params, pk, msgs, flip(sig, 0, 0))


def test_batch_full_and_permuted():
    params = setup()
    sk, pk = keygen(params, fresh_sources(4))
    msgs = [b"first", b"second", b"third"]

    sig = batch_sign(params, sk, msgs)
    batch_verify(params, pk, msgs, sig)

    with pytest.raises(InvalidSignature):
        batch_verify(params, pk, [b"second", b"first", b"third"], sig)
    with pytest.raises(InvalidSignature):
        batch_verify(params, pk, msgs[:2], sig)


def test_batch_slot_mapping():
    params = setup()
    sk, pk = keygen(params, fresh_sources(4))
    bound = {1: b"name", 3: b"country"}

    sig = batch_sign(params, sk, bound)
    batch_verify(params, pk, bound, sig)

    with pytest.raises(InvalidSignature):
        batch_verify(params, pk, [b"name", b"country"], sig)
    with pytest.raises(InvalidSignature):
        batch_verify(params, pk, {1: b"name", 2: b"country"}, sig)


def test_batch_too_many_messages():
    params = setup()
    sk, pk = keygen(params, fresh_sources(2))
    sig = sign(params, sk, b"a")
    with pytest.raises(SlotMismatch):
        batch_verify(params, pk, [b"a", b"b"], sig)


def test_aggregate_ps_sign():
    params = setup()
    sk, pk = keygen(params, fresh_sources(4))
    msgs = [b"PS Aggregate verify 1", b"PS Aggregate verify 2", b"PS Aggregate verify 3"]

    chain = aggregate_initiate(params, sk, msgs[0])
    chain = aggregate_extend(params, sk[2], chain, msgs[1])
    chain = aggregate_extend(params, sk[3], chain, msgs[2])
    batch_verify(params, pk, msgs, chain)


def test_aggregate_ps_fail_sign():
    params = setup()
    sk, pk = keygen(params, fresh_sources(4))
    msgs = [b"PS Aggregate verify 1", b"PS Aggregate verify 2", b"PS Aggregate verify 3"]

    chain = aggregate_initiate(params, sk, msgs[0])
    chain = aggregate_extend(params, sk[2], chain, msgs[1])
    chain = aggregate_extend(params, sk[3], chain, msgs[2])

    with pytest.raises(InvalidSignature):
        batch_verify(params, pk, msgs, flip(chain, 0, 1))

    # Truncated chain, reordered chain
    with pytest.raises(InvalidSignature):
        batch_verify(params, pk, msgs[:2], chain)
    with pytest.raises(InvalidSignature):
        batch_verify(params, pk, [msgs[0], msgs[2], msgs[1]], chain)


def test_aggregate_signers_hold_only_their_slot():
    params = setup()
    issuer_sk, _ = keygen(params, fresh_sources(2))
    y2, y3 = params.o.random(), params.o.random()
    pk = PrivateKey([issuer_sk.x, issuer_sk[1], y2, y3]).public_key(params)

    chain = aggregate_initiate(params, issuer_sk, b"m1")
    chain = aggregate_extend(params, y2, chain, b"m2")
    chain = aggregate_extend(params, y3, chain, b"m3")
    batch_verify(params, pk, [b"m1", b"m2", b"m3"], chain)

    # Wrong extension order
    chain = aggregate_initiate(params, issuer_sk, b"m1")
    chain = aggregate_extend(params, y3, chain, b"m2")
    chain = aggregate_extend(params, y2, chain, b"m3")
    assert not is_valid(params, pk, [b"m1", b"m2", b"m3"], chain)


def test_randomized_verifies():
    params = setup()
    sk, pk = keygen(params, fresh_sources(3))
    sig = randomize(params, batch_sign(params, sk, [b"a", b"b"]))
    batch_verify(params, pk, [b"a", b"b"], sig)

    chain = aggregate_extend(params, sk[2], aggregate_initiate(params, sk, b"a"), b"b")
    batch_verify(params, pk, [b"a", b"b"], randomize(params, chain))


def test_sha256_encoding():
    params = setup(message_encoding="sha256")
    raw = setup()
    sk, pk = keygen(params, fresh_sources(2))
    sig = sign(params, sk, b"Hello World!")
    verify(params, pk, b"Hello World!", sig)
    assert not is_valid(raw, pk, [b"Hello World!"], sig)


def test_is_valid():
    params = setup()
    sk, pk = keygen(params, fresh_sources(2))
    sig = sign(params, sk, b"x")
    assert is_valid(params, pk, [b"x"], sig)
    assert not is_valid(params, pk, [b"y"], sig)
    assert not is_valid(params, pk, [b"x"], Signature(b"", b""))
