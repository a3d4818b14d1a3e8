""" Signing the attributes of a credential with Pointcheval-Sanders signatures,
to demonstrate the pssig library. For full details of the scheme see:

David Pointcheval, Olivier Sanders: Short Randomizable Signatures. CT-RSA 2016: 111-126

An issuer signs all attributes of a user at once. The user re-randomises the
signature before each showing, so two showings cannot be linked by the
signature alone. A chain of endorsers can also co-sign one attribute each.
"""

from pssig import setup, keygen, fresh_sources, batch_sign, batch_verify, randomize
from pssig import aggregate_initiate, aggregate_extend, is_valid
from pssig import InvalidSignature

ATTRIBUTES = [b"name=Alice", b"age=42", b"country=UK"]

def issue(params, sk, attributes):
	return batch_sign(params, sk, attributes)

def show(params, credential):
	return randomize(params, credential)

def endorse(params, sk, attributes):
	(first, rest) = attributes[0], attributes[1:]
	chain = aggregate_initiate(params, sk, first)
	for slot, attribute in enumerate(rest, 2):
		# Each endorser only ever holds its own slot secret
		chain = aggregate_extend(params, sk[slot], chain, attribute)
	return chain

# ---------- TESTS -------------

import pytest

def test_issue_show():
	params = setup()
	sk, pk = keygen(params, fresh_sources(len(ATTRIBUTES) + 1))

	credential = issue(params, sk, ATTRIBUTES)
	showing1 = show(params, credential)
	showing2 = show(params, credential)

	assert showing1 != showing2
	batch_verify(params, pk, ATTRIBUTES, showing1)
	batch_verify(params, pk, ATTRIBUTES, showing2)

def test_show_wrong_attribute():
	params = setup()
	sk, pk = keygen(params, fresh_sources(len(ATTRIBUTES) + 1))

	credential = issue(params, sk, ATTRIBUTES)
	with pytest.raises(InvalidSignature):
		batch_verify(params, pk, [b"name=Alice", b"age=21", b"country=UK"], show(params, credential))

def test_endorse():
	params = setup(message_encoding="sha256")
	sk, pk = keygen(params, fresh_sources(len(ATTRIBUTES) + 1))

	chain = endorse(params, sk, ATTRIBUTES)
	assert is_valid(params, pk, ATTRIBUTES, chain)
	assert is_valid(params, pk, ATTRIBUTES, show(params, chain))

if __name__ == "__main__":
	params = setup()
	sk, pk = keygen(params, fresh_sources(len(ATTRIBUTES) + 1))
	credential = issue(params, sk, ATTRIBUTES)
	print("Credential valid: %s" % is_valid(params, pk, ATTRIBUTES, show(params, credential)))
	print("Endorsement valid: %s" % is_valid(params, pk, ATTRIBUTES, endorse(params, sk, ATTRIBUTES)))
