"""Refresh-token sessions: issuance, rotation, revocation and capping.

Each refresh row moves one way, ``active -> revoked`` by an explicit write or
``active -> expired`` as time passes. Expiry is checked lazily against the
injected clock; nothing sweeps old rows.

Issuing a session locks the owning user row, inserts the new refresh row and
revokes every active row beyond the newest ``MAX_ACTIVE_SESSIONS`` before the
single commit. Rotation runs lookup, conditional revoke, the replacement insert
and the cap in one transaction, so a presented secret mints at most one
successor and a failed mint leaves the old secret untouched. Every write path
locks the user row before touching that user's refresh rows.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from branchgate.core.config import Settings, settings as default_settings
from branchgate.core.exceptions import InvalidRefreshTokenError
from branchgate.core.security import generate_refresh_token, hash_refresh_token
from branchgate.core.tokens import AccessTokenCodec, Clock, utcnow
from branchgate.db.session import transaction
from branchgate.models.refresh_token import RefreshToken, as_utc
from branchgate.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    access_expires_at: dt.datetime
    refresh_token: str
    refresh_expires_at: dt.datetime


@dataclass(frozen=True)
class SessionInfo:
    id: int
    created_at: dt.datetime
    expires_at: dt.datetime


def _active(query, now: dt.datetime):
    return query.filter(RefreshToken.revoked_at.is_(None), RefreshToken.expires_at > now)


def revoke_active_tokens(db: Session, user_id: int, now: dt.datetime) -> int:
    """Revoke every active row of ``user_id`` without committing."""
    return _active(db.query(RefreshToken).filter(RefreshToken.user_id == user_id), now).update(
        {RefreshToken.revoked_at: now}, synchronize_session=False
    )


class SessionManager:
    def __init__(
        self,
        config: Settings | None = None,
        codec: AccessTokenCodec | None = None,
        *,
        clock: Clock = utcnow,
    ) -> None:
        self._settings = config or default_settings
        self._clock = clock
        self._codec = codec or AccessTokenCodec(self._settings, clock=clock)

    @property
    def codec(self) -> AccessTokenCodec:
        return self._codec

    @property
    def clock(self) -> Clock:
        return self._clock

    def issue_for_user(self, db: Session, user: User) -> TokenPair:
        with transaction(db):
            self._lock_user(db, user.id)
            pair = self._mint(db, user, self._clock())
        logger.info("Session issued: user_id=%s", user.id)
        return pair

    def rotate(self, db: Session, presented: str) -> tuple[TokenPair, User]:
        digest = hash_refresh_token(presented)
        now = self._clock()
        with transaction(db):
            row = db.query(RefreshToken).filter(RefreshToken.token_hash == digest).one_or_none()
            if row is None:
                logger.warning("Refresh failed: unknown token")
                raise InvalidRefreshTokenError()
            if row.revoked_at is not None:
                logger.warning("Refresh failed: reuse of revoked token (user_id=%s, token_id=%s)", row.user_id, row.id)
                raise InvalidRefreshTokenError()
            if as_utc(row.expires_at) <= now:
                logger.warning("Refresh failed: expired token (user_id=%s, token_id=%s)", row.user_id, row.id)
                raise InvalidRefreshTokenError()

            # user row before refresh rows, the same order issuance and cap eviction use
            user = self._lock_user(db, row.user_id)
            if user is None or not user.is_active:
                logger.warning("Refresh failed: missing or inactive user (user_id=%s)", row.user_id)
                raise InvalidRefreshTokenError()

            revoked = (
                db.query(RefreshToken)
                .filter(RefreshToken.id == row.id, RefreshToken.revoked_at.is_(None))
                .update({RefreshToken.revoked_at: now}, synchronize_session=False)
            )
            if revoked != 1:
                logger.warning("Refresh failed: concurrent rotation (user_id=%s, token_id=%s)", row.user_id, row.id)
                raise InvalidRefreshTokenError()

            pair = self._mint(db, user, now)
        logger.info("Session rotated: user_id=%s", user.id)
        return pair, user

    def revoke(self, db: Session, presented: str) -> None:
        digest = hash_refresh_token(presented)
        now = self._clock()
        with transaction(db):
            count = _active(db.query(RefreshToken).filter(RefreshToken.token_hash == digest), now).update(
                {RefreshToken.revoked_at: now}, synchronize_session=False
            )
        if count != 1:
            logger.warning("Logout: token unknown, expired or already revoked")
            raise InvalidRefreshTokenError()

    def revoke_all_for_user(self, db: Session, user_id: int) -> int:
        with transaction(db):
            self._lock_user(db, user_id)
            count = revoke_active_tokens(db, user_id, self._clock())
        logger.info("Revoked %s session(s) for user_id=%s", count, user_id)
        return count

    def list_active_sessions(self, db: Session, user_id: int) -> list[SessionInfo]:
        rows = (
            _active(db.query(RefreshToken).filter(RefreshToken.user_id == user_id), self._clock())
            .order_by(RefreshToken.created_at.desc(), RefreshToken.id.desc())
            .all()
        )
        return [
            SessionInfo(id=row.id, created_at=as_utc(row.created_at), expires_at=as_utc(row.expires_at))
            for row in rows
        ]

    def _lock_user(self, db: Session, user_id: int) -> User | None:
        # Serializes session writes for one user where the backend supports row locks.
        return db.query(User).filter(User.id == user_id).with_for_update().one_or_none()

    def _mint(self, db: Session, user: User, now: dt.datetime) -> TokenPair:
        """Insert a refresh row and apply the cap; the caller holds the user row lock."""
        access_token, access_expires_at = self._codec.issue(user)
        plain, digest = generate_refresh_token()
        refresh_expires_at = now + dt.timedelta(days=self._settings.REFRESH_TOKEN_EXPIRE_DAYS)
        db.add(
            RefreshToken(
                user_id=user.id,
                token_hash=digest,
                created_at=now,
                expires_at=refresh_expires_at,
            )
        )
        db.flush()
        self._enforce_cap(db, user.id, now)
        return TokenPair(
            access_token=access_token,
            access_expires_at=access_expires_at,
            refresh_token=plain,
            refresh_expires_at=refresh_expires_at,
        )

    def _enforce_cap(self, db: Session, user_id: int, now: dt.datetime) -> None:
        limit = self._settings.MAX_ACTIVE_SESSIONS
        if limit <= 0:
            return
        excess = [
            token_id
            for (token_id,) in _active(
                db.query(RefreshToken.id).filter(RefreshToken.user_id == user_id), now
            )
            .order_by(RefreshToken.created_at.desc(), RefreshToken.id.desc())
            .offset(limit)
            .all()
        ]
        if not excess:
            return
        (
            db.query(RefreshToken)
            .filter(RefreshToken.id.in_(excess), RefreshToken.revoked_at.is_(None))
            .update({RefreshToken.revoked_at: now}, synchronize_session=False)
        )
        logger.info("Session cap reached: revoked %s oldest session(s) for user_id=%s", len(excess), user_id)
