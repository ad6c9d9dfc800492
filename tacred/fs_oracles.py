"""
Fiat-Shamir Random Oracles
===========================

Hash transcripts used by the signature scheme and the token protocol.

Every oracle concatenates its inputs in a fixed order, hashes them with
SHA-512 and reduces the 64-byte digest modulo the group order. The
concatenation order is part of the interoperability contract:

- H_nonce:       Hash(secret ∥ data...)                 Schnorr nonce
- H_challenge:   Hash(G ∥ P ∥ M ∥ data...)              Schnorr challenge
- H_token:       Hash(M ∥ Mk ∥ PI)                      token pairing scalar c
- H_session_share: Hash(nonce ∥ session_id ∥ Y ∥ Yl ∥ Ar)  committee member share

Encoding of the parts:
- bytes are taken verbatim
- str is UTF-8 encoded
- int is 8-byte big-endian
- group elements and scalars use the compressed charm encoding
"""

import hashlib
from typing import Sequence

from charm.toolbox.pairinggroup import PairingGroup, ZR


def _serialize_for_hash(group: PairingGroup, *args) -> bytes:
    """
    Serialize transcript parts for hashing.

    Lists and tuples are flattened in order.
    """
    result = b""
    for arg in args:
        if isinstance(arg, bytes):
            result += arg
        elif isinstance(arg, str):
            result += arg.encode('utf-8')
        elif isinstance(arg, int):
            result += arg.to_bytes(8, 'big')
        elif isinstance(arg, (list, tuple)):
            result += _serialize_for_hash(group, *arg)
        else:
            result += group.serialize(arg)
    return result


def hash_to_scalar(group: PairingGroup, *args) -> ZR:
    """
    Wide reduction of a SHA-512 digest into the scalar field.

    The 512-bit digest is at least twice the size of the group order, so the
    reduction is statistically close to uniform.
    """
    digest = hashlib.sha512(_serialize_for_hash(group, *args)).digest()
    return group.init(ZR, int.from_bytes(digest, 'big') % group.order())


def H_nonce(group: PairingGroup, secret: ZR, data: Sequence) -> ZR:
    """Deterministic Schnorr nonce m = Hash(secret ∥ data...)."""
    return hash_to_scalar(group, secret, list(data))


def H_challenge(group: PairingGroup, G, P, M, data: Sequence) -> ZR:
    """Schnorr challenge c = Hash(G ∥ P ∥ M ∥ data...)."""
    return hash_to_scalar(group, G, P, M, list(data))


def H_token(group: PairingGroup, M, Mk, PI) -> ZR:
    """Token scalar c = Hash(M ∥ Mk ∥ PI) used in the pairing check."""
    return hash_to_scalar(group, M, Mk, PI)


def H_session_share(group: PairingGroup, nonce: ZR, session_id: str,
                    Y_comp: bytes, Yl_comp: bytes, Ar_comp: bytes) -> ZR:
    """Committee member share mi_i = Hash(nonce ∥ session_id ∥ Y ∥ Yl ∥ Ar)."""
    return hash_to_scalar(group, nonce, session_id, Y_comp, Yl_comp, Ar_comp)
