"""
Committee RPC Tests
===================

Runs the Flask committee server in-process through its test client and
routes the requests-based CommitteeClient into it.
"""

import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from tacred.errors import InvalidRegistration, ReplayRejected, SessionNotFound
from tacred.distributed import client as client_module
from tacred.distributed.client import CommitteeClient
from tacred.distributed.committee_server import app, committee_state
from tacred.distributed.serialization import (
    deserialize_point_shares, deserialize_token, serialize_point_shares, serialize_token,
)
from tac_client import TokenClient, issue_token, new_location, new_profile

BASE_URL = "http://committee.test"


class _Response:
    """requests.Response look-alike over a Flask test response."""

    def __init__(self, flask_resp):
        self.status_code = flask_resp.status_code
        self._data = flask_resp.get_json()

    def json(self):
        return self._data

    def raise_for_status(self):
        if self.status_code >= 400:
            raise RuntimeError(f"HTTP {self.status_code}")


@pytest.fixture
def http(monkeypatch):
    """Route requests.get/post of the client module into the Flask app."""
    test_client = app.test_client()

    def fake_get(url, **kwargs):
        return _Response(test_client.get(url[len(BASE_URL):]))

    def fake_post(url, json=None, **kwargs):
        return _Response(test_client.post(url[len(BASE_URL):], json=json))

    monkeypatch.setattr(client_module.requests, 'get', fake_get)
    monkeypatch.setattr(client_module.requests, 'post', fake_post)

    committee_state.update({'setup': None, 'curve': None, 'initialized': False})
    yield test_client
    committee_state.update({'setup': None, 'curve': None, 'initialized': False})


@pytest.fixture
def committee(http):
    """Initialized committee with location 'hq' and profile 'alice'."""
    remote = CommitteeClient(BASE_URL)
    params = remote.init(threshold=2, curve='MNT224')

    _, Yl = new_location(params)
    remote.location('hq', Yl)
    _, R, Ar = new_profile(params)
    remote.profile('alice', 'hq', R, Ar)

    return remote


def test_health_before_init(http):
    assert CommitteeClient(BASE_URL).health() == {'status': 'ok', 'initialized': False}


def test_uninitialized_committee_rejects_calls(http):
    resp = http.post('/start', json={})
    assert resp.status_code == 400
    assert resp.get_json()['success'] is False


def test_token_over_rpc(committee):
    """A full session over HTTP yields a token the server accepts."""
    client = TokenClient(committee.params)

    token = issue_token(committee, client, 'alice')

    assert committee.verify(token)
    assert token.verify(committee.params)
    assert token.verify(committee_state['setup'])


def test_connect_reads_public_params(committee):
    other = CommitteeClient(BASE_URL)
    params = other.connect()

    assert params['threshold'] == 2
    assert params['A2'] == committee.params['A2']


def test_protocol_errors_cross_the_wire(committee):
    _, R, Ar = new_profile(committee.params)
    with pytest.raises(InvalidRegistration, match="location doesn't exist"):
        committee.profile('bob', 'nowhere', R, Ar)

    client = TokenClient(committee.params)
    args = client.start_request('alice')
    session_id, M_shares, PI_shares = committee.start(*args)
    with pytest.raises(ReplayRejected):
        committee.start(*args)

    Akc, Kc = client.accept_start(session_id, M_shares, PI_shares)
    committee.request(session_id, Akc, Kc)
    with pytest.raises(SessionNotFound):
        committee.request(session_id, Akc, Kc)


def test_out_of_range_sequence_is_a_protocol_error(committee):
    sig, profile, _, ts = TokenClient(committee.params).start_request('alice')

    for seq in (-1, 2 ** 64):
        with pytest.raises(ReplayRejected):
            committee.start(sig, profile, seq, ts)


def test_two_clients_over_rpc(committee):
    first = TokenClient(committee.params)
    second = TokenClient(committee.params)

    assert committee.verify(issue_token(committee, first, 'alice'))
    assert committee.verify(issue_token(committee, second, 'alice'))


def test_wire_payload_shapes(committee):
    """Share vectors travel as ordered [index, value] pairs."""
    client = TokenClient(committee.params)
    group = committee.group
    session_id, M_shares, PI_shares = committee.start(*client.start_request('alice'))

    wire = serialize_point_shares(M_shares, group)
    assert [pair[0] for pair in wire] == [1, 2, 3]
    assert all(isinstance(pair[1], str) for pair in wire)
    assert deserialize_point_shares(wire, group).interpolate() == M_shares.interpolate()

    Akc, Kc = client.accept_start(session_id, M_shares, PI_shares)
    token = client.finish(committee.request(session_id, Akc, Kc))
    payload = serialize_token(token, group)
    assert set(payload) == {'Tk', 'M', 'PI', 'sig'}
    assert set(payload['sig']) == {'P', 'c', 'p'}
    assert deserialize_token(payload, group).verify(committee.params)
