"""
Threshold Anonymous Credentials
===============================

Core algebra for a committee of t+1 parties that jointly issues anonymous,
unforgeable access tokens. The committee holds Shamir shares of an identity
secret and an authorization secret over a Type-3 pairing group; a client
assembles its token by Lagrange interpolation of the point shares it receives.

This package implements the building blocks using charm-crypto:

Modules:
--------
- groups: Pairing group initialization and generators
- shares: Polynomials, shares and point shares (evaluation, interpolation,
  reconstruction of committed polynomials)
- signatures: Schnorr signatures with Fiat-Shamir challenges
- fs_oracles: Hash transcripts reduced to scalars
- utils: Pairing products, serialization and scoped wiping of secrets
- errors: Protocol error taxonomy
- distributed: RPC wrapper around the committee (Flask server, HTTP client)

The protocol itself (committee, token, client) lives in the top-level
modules tac_network, tac_token and tac_client.

Usage:
------
    from tacred import setup
    from tacred.shares import Polynomial

    params = setup('MNT224')
    group = params['group']
    s = group.random(ZR)
    poly = Polynomial.rnd(group, s, degree=3)
    assert poly.shares(4).interpolate() == s
"""

__version__ = "0.1.0"

from .groups import setup, get_generators

__all__ = ['setup', 'get_generators']
