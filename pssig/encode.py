""" JSON encoding of PS signatures, public keys and scalars.

Example:
    >>> from pssig.params import setup, fresh_sources
    >>> from pssig.keys import keygen
    >>> from pssig.signer import sign
    >>> params = setup()
    >>> sk, pk = keygen(params, fresh_sources(2))
    >>> sig = sign(params, sk, b"Hello")
    >>> s = PSEncoder().encode({"pk": pk, "sig": sig})
    >>> d = PSDecoder(params).decode(s)
    >>> d["sig"] == sig and d["pk"] == pk
    True

"""

import json
from base64 import b64encode, b64decode

from petlib.bn import Bn

from .errors import EncodingError
from .keys import PublicKey
from .signature import Signature

__all__ = ["PSEncoder", "PSDecoder"]


def _b64(data):
    return b64encode(data).strip().decode("utf8")


class PSEncoder(json.JSONEncoder):
    """
    A JSON encoder that knows about Bn, PublicKey and Signature
    """

    def default(self, o):  # pylint: disable=method-hidden
        if isinstance(o, Bn):
            return {
                '_t': "Bn",
                'bn': _b64(o.binary())
                }

        if isinstance(o, PublicKey):
            return {
                '_t': "PSPublicKey",
                'nid': o.X.group.nid,
                'pts': [_b64(p) for p in o.export()]
                }

        return json.JSONEncoder.default(self, o)

    def iterencode(self, o, _one_shot=False):
        # Tuples are serialised as lists before default() is consulted.
        return json.JSONEncoder.iterencode(self, self._tag(o), _one_shot)

    def _tag(self, o):
        if isinstance(o, Signature):
            return {
                '_t': "PSSignature",
                'sigma1': _b64(o.sigma1),
                'sigma2': _b64(o.sigma2)
                }
        if isinstance(o, PublicKey):
            return self.default(o)
        if isinstance(o, dict):
            return dict((k, self._tag(v)) for k, v in o.items())
        if isinstance(o, (list, tuple)):
            return [self._tag(v) for v in o]
        return o


class PSDecoder(json.JSONDecoder):
    """
    A JSON decoder that knows about Bn, PublicKey and Signature
    """

    def __init__(self, params):
        json.JSONDecoder.__init__(self, object_hook=self.dict_to_object)
        self.params = params

    def dict_to_object(self, d):
        try:
            if d.get(u"_t") == u"Bn":
                return Bn.from_binary(b64decode(d[u"bn"]))

            if d.get(u"_t") == u"PSSignature":
                return Signature(b64decode(d[u"sigma1"]), b64decode(d[u"sigma2"]))

            if d.get(u"_t") == u"PSPublicKey":
                if d[u"nid"] != self.params.nid:
                    raise EncodingError("Public key is over curve %s" % d[u"nid"])
                return PublicKey.from_bytes([b64decode(p) for p in d[u"pts"]], self.params)

        except (KeyError, TypeError, ValueError) as exc:
            raise EncodingError("Malformed %s object" % d.get(u"_t")) from exc

        return d


# --- TESTS ---

import pytest


def test_encoder_bn():
    e = PSEncoder()
    s = e.encode([Bn(1), Bn(2)])
    x = PSDecoder(None).decode(s)
    assert x[0] == 1 and x[1] == 2


def test_encoder_signature_and_key():
    from .keys import keygen
    from .params import setup, fresh_sources
    from .signer import batch_sign
    from .verifier import batch_verify

    params = setup()
    sk, pk = keygen(params, fresh_sources(3))
    sig = batch_sign(params, sk, [b"a", b"b"])

    s = PSEncoder().encode([pk, [sig]])
    pk2, (sig2,) = PSDecoder(params).decode(s)
    assert isinstance(sig2, Signature)
    batch_verify(params, pk2, [b"a", b"b"], sig2)


def test_decoder_errors():
    from .params import setup
    params = setup()

    with pytest.raises(EncodingError):
        PSDecoder(params).decode('{"_t": "PSSignature", "sigma1": "AA=="}')

    with pytest.raises(EncodingError):
        PSDecoder(params).decode('{"_t": "PSPublicKey", "nid": -1, "pts": []}')

    with pytest.raises(EncodingError):
        PSDecoder(params).decode('{"_t": "PSPublicKey", "nid": %d, "pts": ["AQID", "AQID"]}' % params.nid)
