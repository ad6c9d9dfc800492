"""
Committee client library.

Wraps the HTTP calls so that a CommitteeClient can stand in for an
in-process NetworkSetup (start/request have the same signatures and raise the
same protocol errors).
"""

from typing import Tuple

import requests

from tac_token import Token
from tacred.errors import ERROR_TYPES
from tacred.shares import PointShareVector
from tacred.signatures import ExtSignature
from tacred.distributed.config import config
from tacred.distributed.serialization import (
    deserialize_point_shares, deserialize_public_params, serialize_elem,
    serialize_ext_signature, serialize_token,
)


def _unwrap(resp) -> dict:
    """Decode a committee response, re-raising protocol errors."""
    if resp.status_code >= 500:
        resp.raise_for_status()

    data = resp.json()
    if not data.get('success', False):
        error_cls = ERROR_TYPES.get(data.get('error_type'))
        if error_cls is not None:
            raise error_cls(data.get('error', ''))
        resp.raise_for_status()
        raise RuntimeError(data.get('error', 'committee request failed'))
    return data


class CommitteeClient:
    """Committee client"""

    def __init__(self, base_url: str = None):
        self.base_url = base_url or config.committee_url
        self.params = None

    @property
    def group(self):
        if self.params is None:
            raise RuntimeError("Call init() or connect() first")
        return self.params['group']

    def health(self) -> dict:
        """Health check"""
        resp = requests.get(f"{self.base_url}/health")
        resp.raise_for_status()
        return resp.json()

    def init(self, threshold: int = None, curve: str = None) -> dict:
        """Create the committee; returns its public parameters."""
        data = {}
        if threshold is not None:
            data['threshold'] = threshold
        if curve:
            data['curve'] = curve
        resp = requests.post(f"{self.base_url}/init", json=data)
        self.params = deserialize_public_params(_unwrap(resp)['public_params'])
        return self.params

    def connect(self) -> dict:
        """Fetch the public parameters of an already initialized committee."""
        resp = requests.get(f"{self.base_url}/public_params")
        self.params = deserialize_public_params(_unwrap(resp)['public_params'])
        return self.params

    def public_params(self) -> dict:
        return self.params

    def location(self, name: str, Yl):
        resp = requests.post(f"{self.base_url}/location", json={
            'name': name,
            'Yl': serialize_elem(Yl, self.group)
        })
        _unwrap(resp)

    def profile(self, name: str, loc: str, R, Ar):
        resp = requests.post(f"{self.base_url}/profile", json={
            'name': name,
            'loc': loc,
            'R': serialize_elem(R, self.group),
            'Ar': serialize_elem(Ar, self.group)
        })
        _unwrap(resp)

    def start(self, signature: ExtSignature, profile_name: str, seq: int,
              timestamp: int) -> Tuple[str, PointShareVector, PointShareVector]:
        resp = requests.post(f"{self.base_url}/start", json={
            'signature': serialize_ext_signature(signature, self.group),
            'profile': profile_name,
            'seq': seq,
            'timestamp': timestamp
        })
        data = _unwrap(resp)
        return (data['session_id'],
                deserialize_point_shares(data['M_shares'], self.group),
                deserialize_point_shares(data['PI_shares'], self.group))

    def request(self, session_id: str, Akc, Kc) -> PointShareVector:
        resp = requests.post(f"{self.base_url}/request", json={
            'session_id': session_id,
            'Akc': serialize_elem(Akc, self.group),
            'Kc': serialize_elem(Kc, self.group)
        })
        return deserialize_point_shares(_unwrap(resp)['Tk_shares'], self.group)

    def verify(self, token: Token) -> bool:
        resp = requests.post(f"{self.base_url}/verify", json={'token': serialize_token(token, self.group)})
        return _unwrap(resp)['valid']
