""" pssig: Pointcheval-Sanders short randomizable signatures over bilinear pairings.

Example:
    >>> from pssig import setup, fresh_sources, keygen, sign, verify
    >>> params = setup()
    >>> sk, pk = keygen(params, fresh_sources(2))
    >>> sig = sign(params, sk, b"Hello PS Signature")
    >>> verify(params, pk, b"Hello PS Signature", sig)

"""

import logging

from .errors import (PSError, InsufficientRandomness, EncodingError,
                     InvalidSignature, MalformedSignature, SlotMismatch)
from .params import PSParams, setup, default_source, SeededSource, fresh_sources
from .keys import PrivateKey, PublicKey, keygen
from .signature import Signature
from .signer import sign, batch_sign, randomize
from .aggregator import aggregate_initiate, aggregate_extend
from .verifier import verify, batch_verify, is_valid

# The pssig version
VERSION = '0.1.0'

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ["errors", "params", "keys", "signature", "signer", "aggregator",
           "verifier", "pack", "encode"]


def run_tests():
    # These are only needed in case we test
    import pytest
    import os.path
    import glob

    # List all pssig files in the directory
    pssig_dir = os.path.dirname(os.path.realpath(__file__))
    pyfiles = glob.glob(os.path.join(pssig_dir, '*.py'))

    # Run the test suite, doctests included
    print("Directory: %s" % pyfiles)
    res = pytest.main(["-v", "-x", "--doctest-modules"] + pyfiles)
    print("Result: %s" % res)

    # Return exit result
    return res
