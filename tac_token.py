"""
Access Token
============

The token a client assembles from the committee's point shares.

Construction (client side):
---------------------------
    Tk  = Ar^y · Akc^m         interpolated from request() shares
    M   = G1^m                 interpolated from start() shares
    PI  = R^y                  interpolated from start() shares
    sig = ExtSignature over (Tk, PI) with secret k and base M, so that the
          embedded key is Mk = M^k

Verification:
-------------
1. sig verifies w.r.t. the base M
2. e(Tk, G2) == e(PI, A2) · e(Mk^c, A2)   with c = H(M ∥ Mk ∥ PI)

The pairing product on the right is one multi-pairing (utils.pair_prod).
"""

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, pair

from tacred.fs_oracles import H_token
from tacred.signatures import ExtSignature
from tacred.utils import gt_eq, pair_prod


class Token:
    """Verifiable credential (Tk, M, PI, sig)."""

    def __init__(self, Tk: G1, M: G1, PI: G1, sig: ExtSignature):
        self.Tk = Tk
        self.M = M
        self.PI = PI
        self.sig = sig

    @classmethod
    def new(cls, group: PairingGroup, k: ZR, Tk: G1, M: G1, PI: G1) -> 'Token':
        """Bind (Tk, PI) to the client secret k, using M as the generator."""
        sig = ExtSignature.sign(group, k, M, [Tk, PI])
        return cls(Tk, M, PI, sig)

    @property
    def Mk(self) -> G1:
        return self.sig.P

    def verify(self, setup) -> bool:
        """
        Verify the token against the committee's public parameters.

        Parameters
        ----------
        setup : NetworkSetup or dict
            Anything exposing group, G2 and A2 (attributes or dict keys).
        """
        params = setup.public_params() if hasattr(setup, 'public_params') else setup
        group = params['group']

        if not self.sig.verify(group, self.M, [self.Tk, self.PI]):
            return False

        c = H_token(group, self.M, self.Mk, self.PI)
        lhs = pair(self.Tk, params['G2'])
        rhs = pair_prod([self.PI, self.Mk ** c], [params['A2'], params['A2']], group)
        return gt_eq(lhs, rhs)
