"""
Session Store - SQLAlchemy-backed persistence for charging sessions.

Access pattern:
- at most one ACTIVE session per user (checked by the engine, backed by a
  partial unique index)
- find-then-update: callers load a session, mutate it and call save()

Every write either commits fully or is rolled back; database failures are
raised as DependencyError.
"""
import logging
import uuid
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.charging_session import ChargingSession, ChargingSessionStatus
from .charging_math import utcnow
from .errors import ConflictError, DependencyError

logger = logging.getLogger(__name__)

RECENT_SESSIONS_LIMIT = 5
ONE_ACTIVE_SESSION_INDEX = "uq_charging_sessions_one_active_per_user"


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
        return True
    except ValueError:
        return False


def _start_of_month(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _violates_one_active_session(exc: IntegrityError) -> bool:
    """True if exc came from the one-active-session-per-user partial unique index."""
    message = str(exc.orig)
    # PostgreSQL names the index; SQLite only names the column
    return ONE_ACTIVE_SESSION_INDEX in message or "UNIQUE constraint failed: charging_sessions.user_id" in message


class SessionStore:
    """Charging session repository bound to one SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def find_active_by_user(self, user_id: str) -> Optional[ChargingSession]:
        """Find the user's ACTIVE session, if any."""
        try:
            return (
                self.db.query(ChargingSession)
                .filter(
                    ChargingSession.user_id == user_id,
                    ChargingSession.status == ChargingSessionStatus.ACTIVE,
                )
                .order_by(desc(ChargingSession.start_time))
                .first()
            )
        except SQLAlchemyError as e:
            raise self._failed("find_active_by_user", e)

    def find_by_id(self, session_id: str, user_id: str) -> Optional[ChargingSession]:
        """Find a session owned by user_id. Malformed ids simply match nothing."""
        if not _is_uuid(session_id):
            return None
        try:
            return (
                self.db.query(ChargingSession)
                .filter(
                    ChargingSession.id == session_id,
                    ChargingSession.user_id == user_id,
                )
                .first()
            )
        except SQLAlchemyError as e:
            raise self._failed("find_by_id", e)

    def create(self, session: ChargingSession) -> ChargingSession:
        """Insert a new session and read it back (to obtain its id)."""
        try:
            self.db.add(session)
            self.db.commit()
            self.db.refresh(session)
        except IntegrityError as e:
            if not _violates_one_active_session(e):
                raise self._failed("create", e)
            self.db.rollback()
            logger.warning(f"Rejected second active session for user {session.user_id}")
            raise ConflictError("User already has an active charging session")
        except SQLAlchemyError as e:
            raise self._failed("create", e)
        return session

    def save(self, session: ChargingSession) -> ChargingSession:
        """Persist changes made to a loaded session."""
        try:
            self.db.add(session)
            self.db.commit()
            self.db.refresh(session)
        except SQLAlchemyError as e:
            raise self._failed("save", e)
        return session

    def list_by_user(
        self,
        user_id: str,
        filter: str = "all-time",
        limit: int = 50,
        offset: int = 0,
    ) -> List[ChargingSession]:
        """
        List a user's sessions, most recent first.

        Filters:
            recent: the latest 5 sessions (limit/offset ignored)
            this-month: sessions started since the first of the current UTC month
            all-time: no time restriction
        """
        try:
            query = self.db.query(ChargingSession).filter(ChargingSession.user_id == user_id)
            query = query.order_by(desc(ChargingSession.start_time))

            if filter == "recent":
                return query.limit(RECENT_SESSIONS_LIMIT).all()
            if filter == "this-month":
                query = query.filter(ChargingSession.start_time >= _start_of_month(utcnow()))

            return query.offset(offset).limit(limit).all()
        except SQLAlchemyError as e:
            raise self._failed("list_by_user", e)

    def list_by_user_and_statuses(
        self,
        user_id: str,
        statuses: Sequence[ChargingSessionStatus],
    ) -> List[ChargingSession]:
        """All of a user's sessions whose status is in statuses, oldest first."""
        try:
            return (
                self.db.query(ChargingSession)
                .filter(
                    ChargingSession.user_id == user_id,
                    ChargingSession.status.in_(list(statuses)),
                )
                .order_by(ChargingSession.start_time)
                .all()
            )
        except SQLAlchemyError as e:
            raise self._failed("list_by_user_and_statuses", e)

    def _failed(self, operation: str, exc: Exception) -> DependencyError:
        self.db.rollback()
        logger.error(f"Session store {operation} failed: {exc}", exc_info=True)
        return DependencyError(f"Session store unavailable ({operation})")
