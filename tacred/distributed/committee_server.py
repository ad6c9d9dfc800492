"""
Committee HTTP server.

Wraps one NetworkSetup behind Flask routes. Protocol failures answer 400 with
the error class name so that clients can re-raise them; anything else is a
500.
"""

import logging

from flask import Flask, request, jsonify

from tac_network import NetworkSetup
from tacred.errors import TokenProtocolError
from tacred.groups import setup
from tacred.distributed.config import config
from tacred.distributed.serialization import (
    deserialize_elem, deserialize_ext_signature, deserialize_token,
    serialize_point_shares, serialize_public_params,
)

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Global state
committee_state = {
    'setup': None,
    'curve': None,
    'initialized': False
}


def _protocol_error(e: TokenProtocolError):
    logger.warning("%s: %s", type(e).__name__, e)
    return jsonify({'success': False, 'error': str(e), 'error_type': type(e).__name__}), 400


def _internal_error(e: Exception):
    logger.exception("Committee request failed")
    return jsonify({'success': False, 'error': str(e)}), 500


def _not_initialized():
    return jsonify({'success': False, 'error': 'Committee not initialized'}), 400


@app.route('/health', methods=['GET'])
def health():
    """Health check"""
    return jsonify({'status': 'ok', 'initialized': committee_state['initialized']})


@app.route('/init', methods=['POST'])
def init():
    """Create the committee (threshold, curve) and return its public parameters."""
    try:
        data = request.json or {}
        threshold = int(data.get('threshold', config.threshold))
        params = setup(data.get('curve', config.pairing_curve))

        network = NetworkSetup(threshold, group=params['group'], replay_window=config.replay_window)

        committee_state['setup'] = network
        committee_state['curve'] = params['group_name']
        committee_state['initialized'] = True

        return jsonify({
            'success': True,
            'public_params': serialize_public_params(network.public_params(), params['group_name'])
        })
    except Exception as e:
        return _internal_error(e)


@app.route('/public_params', methods=['GET'])
def public_params():
    """Public parameters of the running committee."""
    if not committee_state['initialized']:
        return _not_initialized()

    network = committee_state['setup']
    return jsonify({
        'success': True,
        'public_params': serialize_public_params(network.public_params(), committee_state['curve'])
    })


@app.route('/location', methods=['POST'])
def location():
    """Register a location commitment Yl."""
    if not committee_state['initialized']:
        return _not_initialized()

    try:
        data = request.json
        network = committee_state['setup']
        network.location(data['name'], deserialize_elem(data['Yl'], network.group))
        return jsonify({'success': True})
    except TokenProtocolError as e:
        return _protocol_error(e)
    except Exception as e:
        return _internal_error(e)


@app.route('/profile', methods=['POST'])
def profile():
    """Register a profile (R, Ar) bound to a location."""
    if not committee_state['initialized']:
        return _not_initialized()

    try:
        data = request.json
        network = committee_state['setup']
        group = network.group
        network.profile(data['name'], data['loc'],
                        deserialize_elem(data['R'], group), deserialize_elem(data['Ar'], group))
        return jsonify({'success': True})
    except TokenProtocolError as e:
        return _protocol_error(e)
    except Exception as e:
        return _internal_error(e)


@app.route('/start', methods=['POST'])
def start():
    """First round: point shares of M and PI."""
    if not committee_state['initialized']:
        return _not_initialized()

    try:
        data = request.json
        network = committee_state['setup']
        group = network.group

        signature = deserialize_ext_signature(data['signature'], group)
        session_id, M_shares, PI_shares = network.start(
            signature, data['profile'], int(data['seq']), int(data['timestamp'])
        )

        return jsonify({
            'success': True,
            'session_id': session_id,
            'M_shares': serialize_point_shares(M_shares, group),
            'PI_shares': serialize_point_shares(PI_shares, group),
        })
    except TokenProtocolError as e:
        return _protocol_error(e)
    except Exception as e:
        return _internal_error(e)


@app.route('/request', methods=['POST'])
def request_token():
    """Second round: point shares of Tk."""
    if not committee_state['initialized']:
        return _not_initialized()

    try:
        data = request.json
        network = committee_state['setup']
        group = network.group

        Tk_shares = network.request(
            data['session_id'], deserialize_elem(data['Akc'], group), deserialize_elem(data['Kc'], group)
        )

        return jsonify({'success': True, 'Tk_shares': serialize_point_shares(Tk_shares, group)})
    except TokenProtocolError as e:
        return _protocol_error(e)
    except Exception as e:
        return _internal_error(e)


@app.route('/verify', methods=['POST'])
def verify():
    """Verify a token against this committee."""
    if not committee_state['initialized']:
        return _not_initialized()

    try:
        network = committee_state['setup']
        token = deserialize_token(request.json['token'], network.group)
        return jsonify({'success': True, 'valid': token.verify(network)})
    except Exception as e:
        return _internal_error(e)


def main():
    """Start the committee server"""
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s %(message)s')
    host = config.committee_host
    port = config.committee_port
    logger.info("Starting committee server on %s:%d", host, port)
    app.run(host=host, port=port, debug=False)


if __name__ == '__main__':
    main()
