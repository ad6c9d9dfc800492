"""
Pairing group bootstrap.

The committee, its clients and the RPC layer all work in one charm
PairingGroup. MNT224 is the default curve; BN254 and SS512 are fallbacks for
charm builds that lack it.
"""

import logging

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, G2, GT, pair

logger = logging.getLogger(__name__)


def setup(group_name: str = 'MNT224') -> dict:
    """
    Load the pairing group, falling back to BN254 and then SS512.

    Returns
    -------
    dict
        'group', the 'group_name' actually loaded, the charm type constants
        'G1', 'G2', 'GT', 'ZR' and the 'pair' function.
    """
    try:
        group = PairingGroup(group_name)
    except Exception as e:
        logger.warning("%s not available (%s), falling back to BN254", group_name, e)
        try:
            group = PairingGroup('BN254')
            group_name = 'BN254'
        except Exception as e2:
            logger.warning("BN254 not available (%s), falling back to SS512", e2)
            group = PairingGroup('SS512')
            group_name = 'SS512'

    return {
        'group': group,
        'group_name': group_name,
        'G1': G1,
        'G2': G2,
        'GT': GT,
        'ZR': ZR,
        'pair': pair,
    }


def get_generators(group: PairingGroup) -> tuple:
    """Random G1 and G2 elements; any non-identity element generates a prime-order group."""
    return group.random(G1), group.random(G2)
