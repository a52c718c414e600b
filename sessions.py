"""
Server-side session stores.

A store maps an opaque session id (carried, signed, in the cookie) to the
session payload ``{"id", "username", "role"}``. Stores are handed to
``create_app`` so handlers and tests can swap the backing implementation.

Expired entries are dropped when read, and every ``set`` sweeps out all
other expired entries, so abandoned sessions do not pile up.
"""
import logging
import threading
from datetime import timedelta

from sqlalchemy import delete, select

from models import db, utcnow, AuthSession

logger = logging.getLogger(__name__)

DEFAULT_LIFETIME = timedelta(hours=24)


class SessionStore:
    """Interface every session backend implements."""

    def __init__(self, lifetime=DEFAULT_LIFETIME):
        self.lifetime = lifetime

    def get(self, session_id):
        raise NotImplementedError

    def set(self, session_id, data):
        raise NotImplementedError

    def destroy(self, session_id):
        raise NotImplementedError

    def purge_expired(self):
        raise NotImplementedError


class InMemorySessionStore(SessionStore):
    """Process-local store, used in tests and single-process development."""

    def __init__(self, lifetime=DEFAULT_LIFETIME):
        super().__init__(lifetime)
        self._sessions = {}
        self._lock = threading.Lock()

    def get(self, session_id):
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            data, expires_at = entry
            if expires_at <= utcnow():
                del self._sessions[session_id]
                logger.debug("Dropped expired session")
                return None
            return dict(data)

    def set(self, session_id, data):
        now = utcnow()
        with self._lock:
            self._drop_expired(now)
            self._sessions[session_id] = (dict(data), now + self.lifetime)

    def destroy(self, session_id):
        with self._lock:
            self._sessions.pop(session_id, None)

    def purge_expired(self):
        with self._lock:
            return self._drop_expired(utcnow())

    def _drop_expired(self, now):
        # Caller holds the lock
        expired = [sid for sid, (_, expires_at) in self._sessions.items() if expires_at <= now]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug("Purged %d expired session(s)", len(expired))
        return len(expired)

    def __len__(self):
        return len(self._sessions)


class DatabaseSessionStore(SessionStore):
    """Sessions persisted in the ``sessions`` table so they survive restarts."""

    def get(self, session_id):
        row = db.session.execute(
            select(AuthSession).where(AuthSession.sid == session_id)
        ).scalar_one_or_none()
        if row is None:
            return None
        if row.expires_at <= utcnow():
            self.destroy(session_id)
            logger.debug("Dropped expired session")
            return None
        return dict(row.data)

    def set(self, session_id, data):
        now = utcnow()
        try:
            purged = db.session.execute(
                delete(AuthSession).where(AuthSession.expires_at <= now)
            ).rowcount
            row = db.session.execute(
                select(AuthSession).where(AuthSession.sid == session_id)
            ).scalar_one_or_none()
        except Exception:
            db.session.rollback()
            raise
        if row is None:
            db.session.add(AuthSession(sid=session_id, data=dict(data), expires_at=now + self.lifetime))
        else:
            row.data = dict(data)
            row.expires_at = now + self.lifetime
        self._commit()
        if purged:
            logger.debug("Purged %d expired session(s)", purged)

    def destroy(self, session_id):
        db.session.execute(delete(AuthSession).where(AuthSession.sid == session_id))
        self._commit()

    def purge_expired(self):
        result = db.session.execute(delete(AuthSession).where(AuthSession.expires_at <= utcnow()))
        self._commit()
        if result.rowcount:
            logger.info("Purged %d expired session(s)", result.rowcount)
        return result.rowcount

    @staticmethod
    def _commit():
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise


def build_session_store(backend, lifetime=DEFAULT_LIFETIME):
    if backend == "memory":
        return InMemorySessionStore(lifetime)
    if backend == "database":
        return DatabaseSessionStore(lifetime)
    raise ValueError(f"Unknown session backend: {backend!r}")
