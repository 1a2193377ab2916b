from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Generic, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .models import AttemptCounter, EmailSubscription, SectionAssessment, TrackedSession
from .schemas import CounterResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

SESSIONS_KEY = "sessions:total"


def attempt_key(section: str, session_id: str) -> str:
	return f"{section}:{session_id}"


@dataclass
class BestEffort(Generic[T]):
	"""Result of a side effect whose failure must not block the response."""

	value: Optional[T] = None
	error: Optional[Exception] = None

	@property
	def ok(self) -> bool:
		return self.error is None


def best_effort(action: Callable[[], T], *, what: str) -> BestEffort[T]:
	try:
		return BestEffort(value=action())
	except SQLAlchemyError as err:
		logger.warning("Ignoring persistence failure during %s: %s", what, err)
		return BestEffort(error=err)


def _insert_for(db: Session):
	if db.get_bind().dialect.name == "postgresql":
		return postgresql.insert
	return sqlite.insert


class AttemptStore:
	def __init__(self, db: Session) -> None:
		self.db = db

	def upsert_increment(self, key: str, *, timestamp: Optional[datetime] = None) -> CounterResult:
		now = datetime.utcnow()
		last_attempt = timestamp or now
		insert = _insert_for(self.db)
		stmt = insert(AttemptCounter.__table__).values(
			key=key, counter=1, last_attempt=last_attempt, created_at=now, updated_at=now
		)
		stmt = stmt.on_conflict_do_update(
			index_elements=[AttemptCounter.__table__.c.key],
			set_={
				"counter": AttemptCounter.__table__.c.counter + 1,
				"last_attempt": last_attempt,
				"updated_at": now,
			},
		)
		try:
			self.db.execute(stmt)
			counter = self.db.execute(
				select(AttemptCounter.counter).where(AttemptCounter.key == key)
			).scalar_one()
			self.db.commit()
		except SQLAlchemyError:
			self.db.rollback()
			raise
		return CounterResult(counter=counter, is_new=counter == 1)

	def current(self, key: str) -> int:
		counter = self.db.execute(
			select(AttemptCounter.counter).where(AttemptCounter.key == key)
		).scalar_one_or_none()
		return counter or 0


class SessionRegistry:
	"""Counts distinct session ids under the well-known SESSIONS_KEY."""

	def __init__(self, db: Session) -> None:
		self.db = db
		self.attempts = AttemptStore(db)

	def track(self, session_id: str) -> int:
		insert = _insert_for(self.db)
		stmt = insert(TrackedSession.__table__).values(session_id=session_id, created_at=datetime.utcnow())
		stmt = stmt.on_conflict_do_nothing(index_elements=[TrackedSession.__table__.c.session_id])
		try:
			inserted = self.db.execute(stmt).rowcount
			self.db.commit()
		except SQLAlchemyError:
			self.db.rollback()
			raise
		if inserted:
			return self.attempts.upsert_increment(SESSIONS_KEY).counter
		return self.attempts.current(SESSIONS_KEY)


class AssessmentStore:
	def __init__(self, db: Session) -> None:
		self.db = db

	def find_by_key(self, section: str, session_id: str) -> Optional[SectionAssessment]:
		return (
			self.db.query(SectionAssessment)
			.filter(SectionAssessment.section == section, SectionAssessment.session_id == session_id)
			.first()
		)

	def save(self, record: SectionAssessment) -> None:
		try:
			self.db.add(record)
			self.db.commit()
		except SQLAlchemyError:
			self.db.rollback()
			raise


class DuplicateSubscription(Exception):
	pass


class SubscriptionStore:
	def __init__(self, db: Session) -> None:
		self.db = db

	def add(self, email: str, session_id: str, section: str) -> EmailSubscription:
		row = EmailSubscription(email=email, session_id=session_id, section=section)
		try:
			self.db.add(row)
			self.db.commit()
		except IntegrityError as err:
			self.db.rollback()
			raise DuplicateSubscription(email) from err
		except SQLAlchemyError:
			self.db.rollback()
			raise
		return row
