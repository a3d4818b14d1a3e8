""" The PS signature value: two G1 points in their canonical byte form. """

from collections import namedtuple

from bplib.bp import G1Elem

from .errors import EncodingError, MalformedSignature

__all__ = ["Signature"]


class Signature(namedtuple("Signature", ["sigma1", "sigma2"])):
    """ A PS signature ``(sigma1, sigma2)``.

    Both components are the compressed encodings of G1 points, so a
    signature can be stored, sent, or tampered with as plain bytes.
    """

    __slots__ = ()

    @classmethod
    def from_points(cls, s1, s2):
        """ Builds a signature from two G1 points. """
        try:
            return cls(s1.export(), s2.export())
        except Exception as exc:  # pylint: disable=broad-except
            raise EncodingError("Cannot export signature point") from exc

    def points(self, params):
        """ Decodes both components into G1 points.

        Raises:
            MalformedSignature: if either component is not a valid encoding.
        """
        pts = []
        for name, data in zip(self._fields, self):
            if not isinstance(data, bytes):
                raise MalformedSignature("%s must be bytes" % name)
            try:
                pts.append(G1Elem.from_bytes(data, params.G))
            except Exception as exc:  # pylint: disable=broad-except
                raise MalformedSignature("%s is not a G1 point" % name) from exc
        return tuple(pts)


# --- TESTS ---

import pytest

from .params import setup


def test_points():
    params = setup()
    s1 = params.o.random() * params.g1
    s2 = params.o.random() * params.g1
    sig = Signature.from_points(s1, s2)
    assert isinstance(sig.sigma1, bytes)

    d1, d2 = sig.points(params)
    assert d1 == s1 and d2 == s2


def test_malformed():
    params = setup()
    with pytest.raises(MalformedSignature):
        Signature(b"\x07" * 33, params.g1.export()).points(params)

    with pytest.raises(MalformedSignature):
        Signature(None, params.g1.export()).points(params)
