"""
Utility Functions
=================

Group helpers shared by the share algebra, the signatures and the protocol.

Key Operations:
- Pairing products: ∏ e(g_i, ĝ_i) as one multi-pairing
- Identity elements: The neutral element of whatever group an element lives in
- Serialization: Compressed encodings of group elements and scalars
- Wiping: Overwrite secret scalars in a guaranteed-cleanup block

According to charm-crypto documentation:
- Group operations use * for multiplication, ** for exponentiation
- Inverse is computed as elem ** -1
- Pairing is computed as pair(g1_elem, g2_elem)
- PairingGroup.serialize() produces the compressed encoding of any element
"""

from contextlib import contextmanager
from typing import List

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, G2, GT


def pair_prod(g1_elems: List[G1], g2_elems: List[G2], group: PairingGroup) -> GT:
    """
    Compute product of pairings: ∏ e(g1_elems[i], g2_elems[i]).

    The terms go to charm's multi-pairing in one call, so the Miller loops
    share a single final exponentiation.

    Notes
    -----
    - If lists are empty, returns the identity element 1_GT
    - g1_elems and g2_elems must have the same length

    Examples
    --------
    >>> result = pair_prod([PI, Mk ** c], [A2, A2], group)
    >>> # Equivalent to: e(PI, A2) * e(Mk^c, A2)
    """
    if len(g1_elems) != len(g2_elems):
        raise ValueError(f"g1_elems and g2_elems must have same length: {len(g1_elems)} != {len(g2_elems)}")

    if not g1_elems:
        return group.init(GT, 1)

    return group.pair_prod(list(g1_elems), list(g2_elems))


def gt_eq(a: GT, b: GT) -> bool:
    """Test equality of two GT elements."""
    return a == b


def identity_like(elem, group: PairingGroup):
    """
    Return the neutral element of the group `elem` belongs to.

    Works for G1, G2 and GT alike since elem^0 is the identity of elem's group.
    """
    return elem ** group.init(ZR, 0)


def serialize_element(elem, group: PairingGroup) -> bytes:
    """Compressed encoding of a group element or scalar."""
    return group.serialize(elem)


def zeroize(values: list, group: PairingGroup):
    """
    Overwrite every scalar held in `values` with zero, in place.

    Python cannot scrub the memory of an immutable object, so wiping means
    dropping every reference this container holds to the secret value.
    """
    zero = group.init(ZR, 0)
    for idx in range(len(values)):
        values[idx] = zero


@contextmanager
def scoped_wipe(*holders):
    """
    Wipe secret holders (anything with a wipe() method) on every exit path.

    Examples
    --------
    >>> y_poly = Polynomial.rnd(group, y, threshold)
    >>> with scoped_wipe(y_poly):
    ...     yi = y_poly.shares(threshold + 1)
    """
    try:
        yield holders
    finally:
        for holder in holders:
            holder.wipe()
