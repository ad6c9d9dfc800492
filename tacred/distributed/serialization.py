"""
Wire encodings for the committee RPC.

Group elements and scalars travel as base64 of their compressed charm
encoding; share vectors as ordered [index, value] pairs.
"""

import base64
from typing import List

from charm.toolbox.pairinggroup import PairingGroup

from tac_token import Token
from tacred.shares import PointShare, PointShareVector
from tacred.signatures import ExtSignature, Signature


def serialize_elem(elem, group: PairingGroup) -> str:
    """Serialize a G1/G2/GT/ZR element to a base64 string."""
    return base64.b64encode(group.serialize(elem)).decode('utf-8')


def deserialize_elem(data: str, group: PairingGroup):
    """Inverse of serialize_elem()."""
    return group.deserialize(base64.b64decode(data))


def serialize_point_shares(shares: PointShareVector, group: PairingGroup) -> List[list]:
    return [[s.i, serialize_elem(s.Yi, group)] for s in shares]


def deserialize_point_shares(data: List[list], group: PairingGroup) -> PointShareVector:
    return PointShareVector([PointShare(int(i), deserialize_elem(v, group)) for i, v in data], group)


def serialize_ext_signature(sig: ExtSignature, group: PairingGroup) -> dict:
    return {
        'P': serialize_elem(sig.P, group),
        'c': serialize_elem(sig.sig.c, group),
        'p': serialize_elem(sig.sig.p, group),
    }


def deserialize_ext_signature(data: dict, group: PairingGroup) -> ExtSignature:
    sig = Signature(deserialize_elem(data['c'], group), deserialize_elem(data['p'], group))
    return ExtSignature(deserialize_elem(data['P'], group), sig)


def serialize_token(token: Token, group: PairingGroup) -> dict:
    return {
        'Tk': serialize_elem(token.Tk, group),
        'M': serialize_elem(token.M, group),
        'PI': serialize_elem(token.PI, group),
        'sig': serialize_ext_signature(token.sig, group),
    }


def deserialize_token(data: dict, group: PairingGroup) -> Token:
    return Token(
        deserialize_elem(data['Tk'], group),
        deserialize_elem(data['M'], group),
        deserialize_elem(data['PI'], group),
        deserialize_ext_signature(data['sig'], group),
    )


def serialize_public_params(params: dict, curve: str) -> dict:
    """Serialize the committee's public parameters."""
    group = params['group']
    return {
        'curve': curve,
        'threshold': params['threshold'],
        'G1': serialize_elem(params['G1'], group),
        'G2': serialize_elem(params['G2'], group),
        'Y': serialize_elem(params['Y'], group),
        'A1': serialize_elem(params['A1'], group),
        'A2': serialize_elem(params['A2'], group),
    }


def deserialize_public_params(data: dict) -> dict:
    """Rebuild the public parameters, initializing the named curve locally."""
    group = PairingGroup(data['curve'])
    params = {'group': group, 'threshold': data['threshold']}
    for key in ('G1', 'G2', 'Y', 'A1', 'A2'):
        params[key] = deserialize_elem(data[key], group)
    return params
