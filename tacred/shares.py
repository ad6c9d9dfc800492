"""
Polynomial and Share Algebra
============================

Shamir secret sharing over the scalar field of a pairing group, and the same
algebra lifted into the exponent.

Types:
------
- Polynomial:       a_0 + a_1 x + ... + a_t x^t over Z_p, a_0 is the secret
- PointPolynomial:  the polynomial lifted to a group, coefficients G^{a_k}
- Share:            (i, y_i) with y_i = f(i)
- PointShare:       (i, Y_i) with Y_i = G^{y_i}
- ShareVector / PointShareVector: ordered collections of the above

Point types are generic over the group: the same classes hold G1, G2 or GT
elements. charm writes every group multiplicatively, so "adding" two points
is `*` and "scaling" a point by a scalar is `**`.

Formulas:
---------
Lagrange basis at x = 0 for nodes x_0..x_k:

    l_i = ∏_{j≠i} x_j / ∏_{j≠i} (x_j − x_i)

Interpolation of the secret:

    f(0) = Σ_i l_i · y_i            (scalars)
    F(0) = ∏_i Y_i^{l_i}            (points)

Reconstruction of a committed polynomial from point shares (barycentric form):

    F_k = ∏_i Y_i^{w_i · n_{i,k}}

where n_{i,k} is the k-th coefficient of ∏_{j≠i} (x − x_j) and
w_i = 1 / ∏_{j≠i} (x_i − x_j).

All operations allocate new objects; inputs are never mutated, except by the
explicit wipe() methods.
"""

from typing import List, Sequence, Tuple

from charm.toolbox.pairinggroup import PairingGroup, ZR

from .errors import DegenerateInterpolation, IndexMismatch
from .utils import identity_like, zeroize


def _as_scalar(x, group: PairingGroup):
    if isinstance(x, int):
        return group.init(ZR, x)
    return x


def _check_index(i: int, j: int):
    if i != j:
        raise IndexMismatch(f"Shares must be in the same order: index {i} != {j}")


def _mul_linear(coefs: List[ZR], root: ZR, group: PairingGroup) -> List[ZR]:
    """Multiply the polynomial `coefs` by (x − root)."""
    out = [group.init(ZR, 0) for _ in range(len(coefs) + 1)]
    for k, c in enumerate(coefs):
        out[k] = out[k] - c * root
        out[k + 1] = out[k + 1] + c
    return out


def lagrange_coefficient(group: PairingGroup, nodes: Sequence, i: int) -> ZR:
    """
    Lagrange basis coefficient l_i at x = 0 for the node set `nodes`.

    Parameters
    ----------
    group : PairingGroup
        The pairing group
    nodes : Sequence
        The x-coordinates (ints or ZR), in share order
    i : int
        Position of the node whose coefficient is wanted (0-based)

    Raises
    ------
    DegenerateInterpolation
        If `nodes` contains the node at position i more than once.
    """
    xs = [_as_scalar(x, group) for x in nodes]
    zero = group.init(ZR, 0)
    num = group.init(ZR, 1)
    denom = group.init(ZR, 1)
    for j, xj in enumerate(xs):
        if j != i:
            num *= xj
            denom *= xj - xs[i]

    if denom == zero:
        raise DegenerateInterpolation(f"Duplicate evaluation point {nodes[i]} in {list(nodes)}")

    return num * (denom ** -1)


def lagrange_numerator(group: PairingGroup, nodes: Sequence, i: int) -> Tuple[List[ZR], ZR]:
    """
    Numerator polynomial ∏_{j≠i} (x − x_j) and barycentric weight of node i.

    Returns
    -------
    Tuple[List[ZR], ZR]
        (coefficients in ascending order, w_i = 1 / ∏_{j≠i} (x_i − x_j))
    """
    xs = [_as_scalar(x, group) for x in nodes]
    zero = group.init(ZR, 0)
    num = [group.init(ZR, 1)]
    denom = group.init(ZR, 1)
    for j, xj in enumerate(xs):
        if j != i:
            num = _mul_linear(num, xj, group)
            denom *= xs[i] - xj

    if denom == zero:
        raise DegenerateInterpolation(f"Duplicate evaluation point {nodes[i]} in {list(nodes)}")

    return num, denom ** -1


# ============================================================================
# Share / PointShare
# ============================================================================

class Share:
    """Evaluation y_i = f(i) of a secret polynomial."""

    def __init__(self, i: int, yi: ZR):
        self.i = i
        self.yi = yi

    def add(self, other: 'Share') -> 'Share':
        _check_index(self.i, other.i)
        return Share(self.i, self.yi + other.yi)

    def sub(self, other: 'Share') -> 'Share':
        _check_index(self.i, other.i)
        return Share(self.i, self.yi - other.yi)

    def offset(self, k: ZR) -> 'Share':
        return Share(self.i, self.yi + k)

    def scale(self, k: ZR) -> 'Share':
        return Share(self.i, self.yi * k)

    def lift(self, G) -> 'PointShare':
        """Move the share into the exponent: (i, G^{y_i})."""
        return PointShare(self.i, G ** self.yi)

    def __repr__(self):
        return f"Share(i={self.i})"


class PointShare:
    """Evaluation Y_i = F(i) of a committed polynomial, in any group."""

    def __init__(self, i: int, Yi):
        self.i = i
        self.Yi = Yi

    def add(self, other: 'PointShare') -> 'PointShare':
        _check_index(self.i, other.i)
        return PointShare(self.i, self.Yi * other.Yi)

    def sub(self, other: 'PointShare') -> 'PointShare':
        _check_index(self.i, other.i)
        return PointShare(self.i, self.Yi * (other.Yi ** -1))

    def offset(self, P) -> 'PointShare':
        return PointShare(self.i, self.Yi * P)

    def scale(self, k: ZR) -> 'PointShare':
        return PointShare(self.i, self.Yi ** k)

    def __eq__(self, other):
        return isinstance(other, PointShare) and self.i == other.i and self.Yi == other.Yi

    def __repr__(self):
        return f"PointShare(i={self.i})"


# ============================================================================
# Polynomial / PointPolynomial
# ============================================================================

class Polynomial:
    """
    Secret polynomial f(x) = a_0 + a_1 x + ... + a_t x^t over Z_p.

    The coefficients are secret material: call wipe() (or use
    utils.scoped_wipe) once the shares have been handed out.
    """

    def __init__(self, coefs: List[ZR], group: PairingGroup):
        self.coefs = list(coefs)
        self.group = group

    @classmethod
    def rnd(cls, group: PairingGroup, secret: ZR, degree: int) -> 'Polynomial':
        """Random polynomial of the given degree with f(0) = secret."""
        coefs = [secret]
        coefs.extend(group.random(ZR) for _ in range(degree))
        return cls(coefs, group)

    def degree(self) -> int:
        return len(self.coefs) - 1

    def evaluate(self, x) -> ZR:
        """Evaluate f(x) using Horner's rule."""
        if not self.coefs:
            raise ValueError("Cannot evaluate a polynomial without coefficients")

        x = _as_scalar(x, self.group)
        acc = self.coefs[-1]
        for coef in reversed(self.coefs[:-1]):
            acc = acc * x + coef
        return acc

    def shares(self, n: int) -> 'ShareVector':
        """Shares (j, f(j)) for j = 1..n."""
        return ShareVector([Share(j, self.evaluate(j)) for j in range(1, n + 1)], self.group)

    def _zip_coefs(self, other: 'Polynomial'):
        zero = self.group.init(ZR, 0)
        size = max(len(self.coefs), len(other.coefs))
        left = self.coefs + [zero] * (size - len(self.coefs))
        right = other.coefs + [zero] * (size - len(other.coefs))
        return zip(left, right)

    def add(self, other: 'Polynomial') -> 'Polynomial':
        return Polynomial([a + b for a, b in self._zip_coefs(other)], self.group)

    def sub(self, other: 'Polynomial') -> 'Polynomial':
        return Polynomial([a - b for a, b in self._zip_coefs(other)], self.group)

    def scale(self, k: ZR) -> 'Polynomial':
        return Polynomial([a * k for a in self.coefs], self.group)

    def lift(self, G) -> 'PointPolynomial':
        """Commit to the polynomial: coefficients G^{a_k}."""
        return PointPolynomial([G ** a for a in self.coefs], self.group)

    def wipe(self):
        zeroize(self.coefs, self.group)
        self.coefs.clear()


class PointPolynomial:
    """
    Committed polynomial F(x) with coefficients A_k = G^{a_k}.

    Lets anyone check a PointShare against the commitment without knowing
    the secret coefficients.
    """

    def __init__(self, coefs: list, group: PairingGroup):
        self.coefs = list(coefs)
        self.group = group

    def degree(self) -> int:
        return len(self.coefs) - 1

    def evaluate(self, x):
        """Evaluate F(x) = ∏_k A_k^{x^k} using Horner's rule."""
        if not self.coefs:
            raise ValueError("Cannot evaluate a polynomial without coefficients")

        x = _as_scalar(x, self.group)
        acc = self.coefs[-1]
        for coef in reversed(self.coefs[:-1]):
            acc = (acc ** x) * coef
        return acc

    def verify(self, share: PointShare) -> bool:
        """Check that the point share lies on the committed polynomial."""
        return share.Yi == self.evaluate(share.i)

    def _zip_coefs(self, other: 'PointPolynomial'):
        if not self.coefs and not other.coefs:
            raise ValueError("Cannot combine polynomials without coefficients")

        identity = identity_like(self.coefs[0] if self.coefs else other.coefs[0], self.group)
        size = max(len(self.coefs), len(other.coefs))
        left = self.coefs + [identity] * (size - len(self.coefs))
        right = other.coefs + [identity] * (size - len(other.coefs))
        return zip(left, right)

    def add(self, other: 'PointPolynomial') -> 'PointPolynomial':
        return PointPolynomial([A * B for A, B in self._zip_coefs(other)], self.group)

    def sub(self, other: 'PointPolynomial') -> 'PointPolynomial':
        return PointPolynomial([A * (B ** -1) for A, B in self._zip_coefs(other)], self.group)

    def scale(self, k: ZR) -> 'PointPolynomial':
        return PointPolynomial([A ** k for A in self.coefs], self.group)

    def __eq__(self, other):
        return isinstance(other, PointPolynomial) and self.coefs == other.coefs


# ============================================================================
# ShareVector / PointShareVector
# ============================================================================

class _Vector:
    """Ordered collection of shares; shared container behaviour."""

    def __init__(self, shares: list, group: PairingGroup):
        self.shares = list(shares)
        self.group = group

    def __len__(self):
        return len(self.shares)

    def __iter__(self):
        return iter(self.shares)

    def __getitem__(self, idx):
        return self.shares[idx]

    def indices(self) -> List[int]:
        return [s.i for s in self.shares]

    def _pairwise(self, other):
        if len(self.shares) != len(other.shares):
            raise IndexMismatch(f"Share vectors differ in length: {len(self.shares)} != {len(other.shares)}")
        return zip(self.shares, other.shares)


class ShareVector(_Vector):
    """Shares of one secret, one per committee member."""

    def add(self, other: 'ShareVector') -> 'ShareVector':
        return ShareVector([a.add(b) for a, b in self._pairwise(other)], self.group)

    def sub(self, other: 'ShareVector') -> 'ShareVector':
        return ShareVector([a.sub(b) for a, b in self._pairwise(other)], self.group)

    def offset(self, k: ZR) -> 'ShareVector':
        return ShareVector([s.offset(k) for s in self.shares], self.group)

    def scale(self, k: ZR) -> 'ShareVector':
        return ShareVector([s.scale(k) for s in self.shares], self.group)

    def lift(self, G) -> 'PointShareVector':
        return PointShareVector([s.lift(G) for s in self.shares], self.group)

    def interpolate(self) -> ZR:
        """
        Value of the shared polynomial at x = 0: Σ l_i · y_i.

        Recovering the true secret needs at least degree + 1 genuine shares;
        this is not checked here.
        """
        if not self.shares:
            raise ValueError("Cannot interpolate an empty share vector")

        nodes = self.indices()
        acc = self.group.init(ZR, 0)
        for pos, share in enumerate(self.shares):
            acc += lagrange_coefficient(self.group, nodes, pos) * share.yi
        return acc

    def wipe(self):
        zero = self.group.init(ZR, 0)
        for share in self.shares:
            share.yi = zero
        self.shares.clear()


class PointShareVector(_Vector):
    """Point shares (i, Y_i) in any group, one per committee member."""

    def add(self, other: 'PointShareVector') -> 'PointShareVector':
        return PointShareVector([a.add(b) for a, b in self._pairwise(other)], self.group)

    def sub(self, other: 'PointShareVector') -> 'PointShareVector':
        return PointShareVector([a.sub(b) for a, b in self._pairwise(other)], self.group)

    def offset(self, P) -> 'PointShareVector':
        return PointShareVector([s.offset(P) for s in self.shares], self.group)

    def scale(self, k: ZR) -> 'PointShareVector':
        return PointShareVector([s.scale(k) for s in self.shares], self.group)

    def interpolate(self):
        """Value of the committed polynomial at x = 0: ∏ Y_i^{l_i}."""
        if not self.shares:
            raise ValueError("Cannot interpolate an empty share vector")

        nodes = self.indices()
        acc = identity_like(self.shares[0].Yi, self.group)
        for pos, share in enumerate(self.shares):
            acc *= share.Yi ** lagrange_coefficient(self.group, nodes, pos)
        return acc

    def reconstruct(self) -> PointPolynomial:
        """
        Recover every coefficient of the committed polynomial.

        With k shares the result has at most k coefficients; trailing identity
        coefficients are trimmed, the constant coefficient is always kept.
        """
        if not self.shares:
            raise ValueError("Cannot reconstruct from an empty share vector")

        nodes = self.indices()
        identity = identity_like(self.shares[0].Yi, self.group)
        acc = [identity for _ in nodes]
        for pos, share in enumerate(self.shares):
            num, weight = lagrange_numerator(self.group, nodes, pos)
            for k, n_k in enumerate(num):
                acc[k] = acc[k] * (share.Yi ** (n_k * weight))

        while len(acc) > 1 and acc[-1] == identity:
            acc.pop()

        return PointPolynomial(acc, self.group)
