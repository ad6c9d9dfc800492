"""
Client Side of the Token Protocol
=================================

Helpers for the parties that talk to the committee:

- new_location(): a location picks l and publishes Yl = Y^l
- new_profile():  a profile picks r and publishes R = G1^r, Ar = A1^r
- TokenClient:    signs start requests, interpolates the committee's point
                  shares and assembles the Token
- issue_token():  one full session against a committee

The committee argument of issue_token() only needs start() and request(),
so an in-process NetworkSetup and an RPC CommitteeClient are interchangeable.
"""

import logging
import time
from typing import Optional, Tuple

from charm.toolbox.pairinggroup import ZR, G1

from tac_network import start_message
from tac_token import Token
from tacred.fs_oracles import H_token
from tacred.shares import PointShareVector
from tacred.signatures import ExtSignature
from tacred.utils import zeroize

logger = logging.getLogger(__name__)


def new_location(params: dict) -> Tuple[ZR, G1]:
    """
    Create a location commitment.

    Returns
    -------
    Tuple[ZR, G1]
        (l, Yl = Y^l); l must never be sent to the committee.
    """
    group = params['group']
    l = group.random(ZR)
    return l, params['Y'] ** l


def new_profile(params: dict) -> Tuple[ZR, G1, G1]:
    """
    Create a profile commitment pair sharing the hidden exponent r.

    Returns
    -------
    Tuple[ZR, G1, G1]
        (r, R = G1^r, Ar = A1^r)
    """
    group = params['group']
    r = group.random(ZR)
    return r, params['G1'] ** r, params['A1'] ** r


class TokenClient:
    """
    A client requesting tokens from the committee.

    Parameters
    ----------
    params : dict
        The committee's public parameters (NetworkSetup.public_params()).
    sk : ZR, optional
        Long-term signing key for start requests; random if omitted. The
        committee counts sequence numbers per public key pk = G1^sk.
    """

    def __init__(self, params: dict, sk: Optional[ZR] = None):
        self.params = params
        self.group = params['group']
        self.sk = sk if sk is not None else self.group.random(ZR)
        self.pk = params['G1'] ** self.sk
        self.seq = 0

        self.session_id = None
        self.M = None
        self.PI = None
        self._k = []

    def start_request(self, profile_name: str, timestamp: Optional[int] = None) -> Tuple[ExtSignature, str, int, int]:
        """Arguments for committee.start(): (signature, profile_name, seq, timestamp)."""
        self.seq += 1
        if timestamp is None:
            timestamp = int(time.time())

        sig = ExtSignature.sign(self.group, self.sk, self.params['G1'],
                                start_message(profile_name, self.seq, timestamp))
        return sig, profile_name, self.seq, timestamp

    def accept_start(self, session_id: str, M_shares: PointShareVector,
                     PI_shares: PointShareVector) -> Tuple[G1, G1]:
        """
        Interpolate M and PI and derive the request parameters.

        Returns
        -------
        Tuple[G1, G1]
            (Akc, Kc) with Kc = G1^{c·k}, Akc = A1^{c·k}, c = H(M ∥ M^k ∥ PI)
        """
        self.session_id = session_id
        self.M = M_shares.interpolate()
        self.PI = PI_shares.interpolate()

        zeroize(self._k, self.group)
        self._k = [self.group.random(ZR)]
        k = self._k[0]

        Mk = self.M ** k
        c = H_token(self.group, self.M, Mk, self.PI)
        Kc = self.params['G1'] ** (c * k)
        Akc = self.params['A1'] ** (c * k)
        return Akc, Kc

    def finish(self, Tk_shares: PointShareVector) -> Token:
        """Interpolate Tk and sign the token; the per-request secret is wiped."""
        if not self._k:
            raise RuntimeError("accept_start() must run before finish()")

        try:
            Tk = Tk_shares.interpolate()
            return Token.new(self.group, self._k[0], Tk, self.M, self.PI)
        finally:
            zeroize(self._k, self.group)
            self._k = []


def issue_token(committee, client: TokenClient, profile_name: str,
                timestamp: Optional[int] = None) -> Token:
    """Run start() and request() against `committee` and build the Token."""
    session_id, M_shares, PI_shares = committee.start(*client.start_request(profile_name, timestamp))
    Akc, Kc = client.accept_start(session_id, M_shares, PI_shares)
    token = client.finish(committee.request(session_id, Akc, Kc))
    logger.debug("Token issued for profile %s (session %s)", profile_name, session_id)
    return token
