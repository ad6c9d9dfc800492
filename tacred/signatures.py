"""
Schnorr Signatures
==================

Schnorr proof of knowledge of s with P = G^s, made non-interactive with
Fiat-Shamir challenges (see fs_oracles).

Formulas:
---------
Sign:
    m = H(s ∥ data...)           deterministic nonce
    M = G^m
    c = H(G ∥ P ∥ M ∥ data...)
    p = m − c·s

Verify:
    M' = P^c · G^p
    accept iff H(G ∥ P ∥ M' ∥ data...) == c

The generator is a parameter: the token protocol signs with the session
basis M in place of a fixed generator.
"""

from typing import Sequence

from charm.toolbox.pairinggroup import PairingGroup, ZR

from .fs_oracles import H_challenge, H_nonce
from .utils import zeroize


class Signature:
    """Schnorr signature (c, p)."""

    def __init__(self, c: ZR, p: ZR):
        self.c = c
        self.p = p

    @classmethod
    def sign(cls, group: PairingGroup, s: ZR, G, P, data: Sequence) -> 'Signature':
        """
        Sign `data` with secret s for the public key P = G^s.

        Parameters
        ----------
        group : PairingGroup
            The pairing group
        s : ZR
            The secret key
        G : G1 or G2
            The generator playing the base role
        P : G1 or G2
            The public key G^s
        data : Sequence
            Message parts (bytes, str, int or group elements)
        """
        nonce = [H_nonce(group, s, data)]
        try:
            M = G ** nonce[0]
            c = H_challenge(group, G, P, M, data)
            p = nonce[0] - c * s
        finally:
            zeroize(nonce, group)

        return cls(c, p)

    def verify(self, group: PairingGroup, G, P, data: Sequence) -> bool:
        M = (P ** self.c) * (G ** self.p)
        return H_challenge(group, G, P, M, data) == self.c


class ExtSignature:
    """Schnorr signature carrying its own public key P = G^s."""

    def __init__(self, P, sig: Signature):
        self.P = P
        self.sig = sig

    @classmethod
    def sign(cls, group: PairingGroup, s: ZR, G, data: Sequence) -> 'ExtSignature':
        P = G ** s
        return cls(P, Signature.sign(group, s, G, P, data))

    def verify(self, group: PairingGroup, G, data: Sequence) -> bool:
        return self.sig.verify(group, G, self.P, data)
