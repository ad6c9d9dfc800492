"""
Committee (Network) Simulation
==============================

The committee is a (t, t+1) threshold network holding shares of two master
secrets:
- y, the identity secret, published as Y = G1^y
- a, the authorization secret, published as A1 = G1^a and A2 = G2^a

All t+1 members are simulated inside one NetworkSetup object; every
per-member computation only touches that member's own shares.

Session lifecycle:
------------------
    NONE --start()--> STARTED --request()--> COMPLETED (session removed)

1. start():   client proves knowledge of its key over (profile, seq, timestamp),
              receives point shares of M = G1^m and PI = R^y
2. request(): client sends (Akc, Kc) with Akc = Kc^a, receives point shares of
              Tk = Ar^y · Akc^m
3. client interpolates Tk and builds the Token (see tac_token)

Registration:
-------------
- location(name, Yl):      Yl = Y^l, l stays with the location
- profile(name, loc, R, Ar): e(Ar, G2) == e(R, A2) proves Ar = R^a

Concurrency:
------------
The replay counters and the session map are the only shared mutable state;
a lock serialises every access to them. Sequence numbers are counted per
signing key (the public key embedded in the start signature), so independent
clients do not collide. Sessions never requested are dropped once they are
older than the replay window.
"""

import hashlib
import logging
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from charm.toolbox.pairinggroup import PairingGroup, ZR, G1, pair

from tacred.errors import InvalidRegistration, ReplayRejected, SessionNotFound, SignatureInvalid
from tacred.fs_oracles import H_session_share
from tacred.groups import get_generators, setup as setup_group
from tacred.shares import Polynomial, PointShareVector, Share, ShareVector
from tacred.signatures import ExtSignature
from tacred.utils import scoped_wipe, serialize_element

logger = logging.getLogger(__name__)

REPLAY_WINDOW_SECONDS = 30
MAX_U64 = 2 ** 64 - 1


def session_id_for(seq: int, timestamp: int) -> str:
    """Session identifier derived from the request's (seq, timestamp)."""
    return hashlib.sha256(seq.to_bytes(8, 'big') + timestamp.to_bytes(8, 'big')).hexdigest()[:16]


def start_message(profile_name: str, seq: int, timestamp: int) -> list:
    """Message parts signed by the client for start()."""
    return [profile_name, seq, timestamp]


class Location:
    """Delegated identity commitment Yl = Y^l of a location."""

    def __init__(self, name: str, Yl: G1, group: PairingGroup):
        self.name = name
        self.Yl = Yl
        self.Yl_comp = serialize_element(Yl, group)


class Profile:
    """Profile bound to a location, carrying (R, Ar) with Ar = R^a."""

    def __init__(self, name: str, loc: str, R: G1, Ar: G1, group: PairingGroup):
        self.name = name
        self.loc = loc
        self.R = R
        self.Ar = Ar
        self.Ar_comp = serialize_element(Ar, group)


class Session:
    """Per-session state kept between start() and request()."""

    def __init__(self, mi: ShareVector, profile: Profile, started: float):
        self.mi = mi
        self.profile = profile
        self.started = started


class NetworkSetup:
    """
    In-process simulation of the threshold committee.

    Parameters
    ----------
    threshold : int
        The polynomial degree t; the committee has t+1 members.
    group : PairingGroup, optional
        The pairing group. If None, setup('MNT224') is used.
    clock : Callable[[], float], optional
        Source of the current time in seconds (time.time by default).
    replay_window : int, optional
        Accepted distance in seconds between a request's timestamp and now.
    """

    def __init__(self, threshold: int, group: Optional[PairingGroup] = None,
                 clock: Callable[[], float] = time.time,
                 replay_window: int = REPLAY_WINDOW_SECONDS):
        if threshold < 0:
            raise ValueError(f"threshold must be non-negative, got {threshold}")

        self.group = group if group is not None else setup_group()['group']
        self.threshold = threshold
        self.clock = clock
        self.replay_window = replay_window

        self.G1, self.G2 = get_generators(self.group)

        y = self.group.random(ZR)
        a = self.group.random(ZR)

        self.Y = self.G1 ** y
        self.A1 = self.G1 ** a
        self.A2 = self.G2 ** a
        self.Y_comp = serialize_element(self.Y, self.group)

        y_poly = Polynomial.rnd(self.group, y, threshold)
        a_poly = Polynomial.rnd(self.group, a, threshold)
        with scoped_wipe(y_poly, a_poly):
            self.yi = y_poly.shares(threshold + 1)
            self.ai = a_poly.shares(threshold + 1)

        self.locations: Dict[str, Location] = {}
        self.profiles: Dict[str, Profile] = {}
        self.sessions: Dict[str, Session] = {}
        self.last_seq: Dict[bytes, int] = {}
        self._lock = threading.Lock()

        logger.info("Committee created: threshold=%d, members=%d", threshold, threshold + 1)

    def public_params(self) -> dict:
        """Everything a client or location may learn about the committee."""
        return {
            'group': self.group,
            'threshold': self.threshold,
            'G1': self.G1,
            'G2': self.G2,
            'Y': self.Y,
            'A1': self.A1,
            'A2': self.A2,
        }

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def location(self, name: str, Yl: G1):
        """Register the delegated commitment Yl = Y^l of a location."""
        if name in self.locations:
            raise InvalidRegistration(f"location {name!r} already exists")

        self.locations[name] = Location(name, Yl, self.group)
        logger.info("Location registered: %s", name)

    def profile(self, name: str, loc: str, R: G1, Ar: G1):
        """
        Register a profile bound to location `loc`.

        Raises
        ------
        InvalidRegistration
            If the location is unknown or e(Ar, G2) != e(R, A2).
        """
        if loc not in self.locations:
            raise InvalidRegistration("location doesn't exist")

        if pair(Ar, self.G2) != pair(R, self.A2):
            raise InvalidRegistration("Ar not valid")

        self.profiles[name] = Profile(name, loc, R, Ar, self.group)
        logger.info("Profile registered: %s (location %s)", name, loc)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def start(self, signature: ExtSignature, profile_name: str, seq: int,
              timestamp: int) -> Tuple[str, PointShareVector, PointShareVector]:
        """
        Open a session for `profile_name`.

        Returns
        -------
        Tuple[str, PointShareVector, PointShareVector]
            (session_id, shares of M = G1^m, shares of PI = R^y)

        Raises
        ------
        InvalidRegistration
            Unknown profile.
        SignatureInvalid
            The signature over (profile_name, seq, timestamp) does not verify.
        ReplayRejected
            seq or timestamp not an unsigned 64-bit integer, timestamp outside
            the replay window, or seq not above the last one of this key.
        """
        if not 1 <= seq <= MAX_U64:
            raise ReplayRejected(f"sequence number {seq} out of range")
        if not 0 <= timestamp <= MAX_U64:
            raise ReplayRejected(f"timestamp {timestamp} out of range")

        profile = self.profiles.get(profile_name)
        if profile is None:
            raise InvalidRegistration("profile doesn't exist")
        location = self.locations[profile.loc]

        if not signature.verify(self.group, self.G1, start_message(profile_name, seq, timestamp)):
            logger.warning("start rejected for %s: invalid signature", profile_name)
            raise SignatureInvalid("start signature not valid")

        now = self.clock()
        if not (now - self.replay_window <= timestamp <= now + self.replay_window):
            logger.warning("start rejected for %s: timestamp %d outside window", profile_name, timestamp)
            raise ReplayRejected(f"timestamp {timestamp} outside the {self.replay_window}s window")

        signer = serialize_element(signature.P, self.group)
        session_id = session_id_for(seq, timestamp)
        mi = self._mi_shares(session_id, location, profile)

        with self._lock:
            last = self.last_seq.get(signer, 0)
            if seq <= last:
                mi.wipe()
                logger.warning("start rejected for %s: seq %d <= %d", profile_name, seq, last)
                raise ReplayRejected(f"sequence number {seq} already used")

            self._prune_sessions(now)
            if session_id in self.sessions:
                mi.wipe()
                logger.warning("start rejected for %s: session %s already open", profile_name, session_id)
                raise ReplayRejected(f"session {session_id} already open")

            M_shares = mi.lift(self.G1)
            PI_shares = self.yi.lift(profile.R)
            self.sessions[session_id] = Session(mi, profile, now)
            self.last_seq[signer] = seq

        logger.debug("Session %s started for profile %s", session_id, profile_name)
        return session_id, M_shares, PI_shares

    def request(self, session_id: str, Akc: G1, Kc: G1) -> PointShareVector:
        """
        Complete a session: shares of Tk = Ar^y · Akc^m.

        The session is consumed; a second request fails.

        Raises
        ------
        InvalidRegistration
            If e(Akc, G2) != e(Kc, A2).
        SessionNotFound
            Unknown or already completed session.
        """
        if pair(Akc, self.G2) != pair(Kc, self.A2):
            raise InvalidRegistration("Akc not valid")

        with self._lock:
            session = self.sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFound(f"session {session_id} not found")

        with scoped_wipe(session.mi):
            Tk_shares = self.yi.lift(session.profile.Ar).add(session.mi.lift(Akc))

        logger.debug("Session %s completed", session_id)
        return Tk_shares

    def last_seq_for(self, public_key: G1) -> int:
        """Last accepted sequence number of a signing key (0 if none)."""
        with self._lock:
            return self.last_seq.get(serialize_element(public_key, self.group), 0)

    def _prune_sessions(self, now: float):
        """Drop sessions started more than replay_window seconds ago. Caller holds the lock."""
        expired = [sid for sid, s in self.sessions.items() if s.started < now - self.replay_window]
        for sid in expired:
            self.sessions.pop(sid).mi.wipe()
        if expired:
            logger.info("Dropped %d expired sessions", len(expired))

    def _mi_shares(self, session_id: str, location: Location, profile: Profile) -> ShareVector:
        """Each member i derives mi_i from its own fresh nonce."""
        mi = []
        for i in range(1, self.threshold + 2):
            nonce = self.group.random(ZR)
            mi.append(Share(i, H_session_share(self.group, nonce, session_id,
                                               self.Y_comp, location.Yl_comp, profile.Ar_comp)))
        return ShareVector(mi, self.group)
