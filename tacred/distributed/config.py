"""
Committee deployment configuration.

Addresses and protocol parameters read from the environment.
"""

import os

# Defaults
DEFAULT_COMMITTEE_HOST = os.getenv('COMMITTEE_HOST', 'localhost')
DEFAULT_COMMITTEE_PORT = int(os.getenv('COMMITTEE_PORT', 5010))

# Protocol parameters
DEFAULT_THRESHOLD = int(os.getenv('COMMITTEE_THRESHOLD', 4))
DEFAULT_PAIRING_CURVE = os.getenv('PAIRING_CURVE', 'MNT224')
DEFAULT_REPLAY_WINDOW = int(os.getenv('REPLAY_WINDOW', 30))


class Config:
    """Deployment settings."""

    def __init__(self):
        self.committee_host = DEFAULT_COMMITTEE_HOST
        self.committee_port = DEFAULT_COMMITTEE_PORT
        self.threshold = DEFAULT_THRESHOLD
        self.pairing_curve = DEFAULT_PAIRING_CURVE
        self.replay_window = DEFAULT_REPLAY_WINDOW

    @property
    def committee_url(self):
        return f"http://{self.committee_host}:{self.committee_port}"


# Global configuration instance
config = Config()
