"""The module packs and unpacks PS keys and signatures to a compact binary
format, building on the msgpack coders of ``petlib.pack``.

Example:
    >>> from pssig.params import setup, fresh_sources
    >>> from pssig.keys import keygen
    >>> from pssig.signer import sign
    >>> params = setup()
    >>> sk, pk = keygen(params, fresh_sources(2))
    >>> sig = sign(params, sk, b"Hello")
    >>> packed = encode([pk, sig])
    >>> pk2, sig2 = decode(packed, params)
    >>> pk2 == pk and sig2 == sig
    True

Packed public keys carry the curve nid; decoding one with
parameters over another curve fails with an ``EncodingError``.
"""

import msgpack
from petlib import pack as petpack
from petlib.bn import Bn

from .errors import EncodingError
from .keys import PrivateKey, PublicKey
from .signature import Signature

__all__ = ["encode", "decode"]

_PRIVATE_KEY, _PUBLIC_KEY, _SIGNATURE = 20, 21, 22


def _enc_ps(obj):
    # Called for every type the petlib coders do not know about
    if type(obj) is tuple:  # pylint: disable=unidiomatic-typecheck
        return list(obj)

    if isinstance(obj, PrivateKey):
        return msgpack.ExtType(_PRIVATE_KEY, msgpack.packb([k.binary() for k in obj], use_bin_type=True))

    if isinstance(obj, PublicKey):
        nid = obj.X.group.nid
        return msgpack.ExtType(_PUBLIC_KEY, msgpack.packb((nid, obj.export()), use_bin_type=True))

    if isinstance(obj, Signature):
        return msgpack.ExtType(_SIGNATURE, msgpack.packb(list(obj), use_bin_type=True))

    raise TypeError("Unknown type: %r" % (type(obj),))


def _make_dec_ps(params):

    def dec_ps(code, data):
        if code == _PRIVATE_KEY:
            blobs = msgpack.unpackb(data, raw=False)
            keys = [Bn.from_binary(b) for b in blobs]
            if not all(k < params.o for k in keys):
                raise EncodingError("Private key scalar not reduced modulo the group order")
            return PrivateKey(keys)

        if code == _PUBLIC_KEY:
            nid, blobs = msgpack.unpackb(data, raw=False)
            if nid != params.nid:
                raise EncodingError("Public key is over curve %s, expected %s" % (nid, params.nid))
            return PublicKey.from_bytes(blobs, params)

        if code == _SIGNATURE:
            sigma1, sigma2 = msgpack.unpackb(data, raw=False)
            return Signature(sigma1, sigma2)

        return msgpack.ExtType(code, data)

    return dec_ps


def encode(structure):
    """ Encodes a structure containing PS keys, signatures and petlib
    objects to bytes. """
    encoder = petpack.make_encoder(_enc_ps)
    try:
        return msgpack.packb(structure, default=encoder, use_bin_type=True, strict_types=True)
    except TypeError as exc:
        raise EncodingError("Cannot encode structure") from exc


def decode(packed_data, params):
    """ Decodes bytes produced by ``encode``, binding points to ``params``.

    Raises:
        EncodingError: if the data is not a valid encoding.
    """
    decoder = petpack.make_decoder(_make_dec_ps(params))
    try:
        return msgpack.unpackb(packed_data, ext_hook=decoder, raw=False)
    except EncodingError:
        raise
    except Exception as exc:  # pylint: disable=broad-except
        raise EncodingError("Cannot decode packed data") from exc


# --- TESTS ---

import pytest

from .keys import keygen
from .params import setup, fresh_sources
from .signer import batch_sign
from .verifier import batch_verify


def test_enc_dec_keys():
    params = setup()
    sk, pk = keygen(params, fresh_sources(3))
    sk2, pk2 = decode(encode([sk, pk]), params)
    assert isinstance(sk2, PrivateKey) and sk2 == sk
    assert isinstance(pk2, PublicKey) and pk2 == pk


def test_enc_dec_signature_still_verifies():
    params = setup()
    sk, pk = keygen(params, fresh_sources(3))
    sig = batch_sign(params, sk, [b"a", b"b"])

    packed = encode({"sig": sig, "pk": pk})
    data = decode(packed, params)
    batch_verify(params, data["pk"], [b"a", b"b"], data["sig"])


def test_enc_dec_mixed():
    params = setup()
    sk, _ = keygen(params, fresh_sources(2))
    test_data = [sk.x, b"spam", u"egg", sk]
    x = decode(encode(test_data), params)
    assert x == test_data


def test_decode_errors():
    params = setup()
    with pytest.raises(EncodingError):
        decode(b"\xc1", params)

    bad_key = msgpack.packb(msgpack.ExtType(_PUBLIC_KEY, msgpack.packb((params.nid, [b"xx", b"yy"]))))
    with pytest.raises(EncodingError):
        decode(bad_key, params)

    other_curve = msgpack.packb(msgpack.ExtType(_PUBLIC_KEY, msgpack.packb((params.nid + 1, []))))
    with pytest.raises(EncodingError):
        decode(other_curve, params)


def test_encode_unknown():
    with pytest.raises(EncodingError):
        encode([object()])
