"""
Test Suite for the Schnorr Signatures and Hash Transcripts
==========================================================
"""

import pytest
from charm.toolbox.pairinggroup import ZR, G1

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from tacred.groups import setup
from tacred.fs_oracles import H_challenge, H_nonce, H_token, hash_to_scalar
from tacred.signatures import ExtSignature, Signature


@pytest.fixture(scope="module")
def group():
    """Initialize pairing group."""
    return setup('MNT224')['group']


@pytest.fixture(scope="module")
def keypair(group):
    G = group.random(G1)
    s = group.random(ZR)
    return G, s, G ** s


@pytest.fixture
def data(group):
    return [group.serialize(group.random(ZR)), b"location-7", "profile", 42]


# ============================================================================
# Hash transcripts
# ============================================================================

def test_hash_to_scalar_is_deterministic(group):
    assert hash_to_scalar(group, b"abc", 1, "x") == hash_to_scalar(group, b"abc", 1, "x")
    assert hash_to_scalar(group, b"abc", 1, "x") != hash_to_scalar(group, b"abc", 2, "x")


def test_hash_order_matters(group, keypair):
    G, _, P = keypair
    assert H_token(group, G, P, G) != H_token(group, P, G, G)


def test_hash_flattens_message_parts(group, keypair):
    """data parts are concatenated after the fixed prefix in order."""
    G, s, P = keypair
    M = G ** group.random(ZR)

    assert H_challenge(group, G, P, M, [b"a", b"b"]) == hash_to_scalar(group, G, P, M, b"ab")
    assert H_nonce(group, s, [b"a", b"b"]) == hash_to_scalar(group, s, b"a", b"b")


# ============================================================================
# Signature
# ============================================================================

def test_sign_verify_roundtrip(group, keypair, data):
    G, s, P = keypair
    sig = Signature.sign(group, s, G, P, data)

    assert sig.verify(group, G, P, data)


def test_nonce_is_deterministic(group, keypair, data):
    """Signing the same message twice gives the same signature."""
    G, s, P = keypair
    sig1 = Signature.sign(group, s, G, P, data)
    sig2 = Signature.sign(group, s, G, P, data)

    assert sig1.c == sig2.c
    assert sig1.p == sig2.p


def test_flipped_byte_rejected(group, keypair, data):
    G, s, P = keypair
    sig = Signature.sign(group, s, G, P, data)

    tampered = list(data)
    first = bytearray(tampered[1])
    first[0] ^= 0x01
    tampered[1] = bytes(first)

    assert not sig.verify(group, G, P, tampered)


def test_perturbed_signature_rejected(group, keypair, data):
    G, s, P = keypair
    sig = Signature.sign(group, s, G, P, data)
    one = group.init(ZR, 1)

    assert not Signature(sig.c + one, sig.p).verify(group, G, P, data)
    assert not Signature(sig.c, sig.p + one).verify(group, G, P, data)


def test_wrong_public_key_rejected(group, keypair, data):
    G, s, P = keypair
    sig = Signature.sign(group, s, G, P, data)

    assert not sig.verify(group, G, G ** group.random(ZR), data)


# ============================================================================
# ExtSignature
# ============================================================================

def test_ext_signature_embeds_public_key(group, keypair, data):
    G, s, P = keypair
    sig = ExtSignature.sign(group, s, G, data)

    assert sig.P == P
    assert sig.verify(group, G, data)


def test_ext_signature_other_data_rejected(group, keypair, data):
    G, s, _ = keypair
    sig = ExtSignature.sign(group, s, G, data)

    assert not sig.verify(group, G, data[:-1] + [43])


def test_ext_signature_other_generator_rejected(group, keypair, data):
    G, s, _ = keypair
    sig = ExtSignature.sign(group, s, G, data)

    assert not sig.verify(group, group.random(G1), data)
