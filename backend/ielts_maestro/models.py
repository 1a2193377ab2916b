from __future__ import annotations
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Text, UniqueConstraint
from .db import Base


class AttemptCounter(Base):
	__tablename__ = "attempt_counters"
	# "<section>:<session id>", or a well-known key such as "sessions:total"
	key = Column(String(192), primary_key=True)
	counter = Column(Integer, default=1, nullable=False)
	last_attempt = Column(DateTime, default=datetime.utcnow, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class TrackedSession(Base):
	__tablename__ = "tracked_sessions"
	session_id = Column(String(128), primary_key=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class SectionAssessment(Base):
	__tablename__ = "section_assessments"
	id = Column(Integer, primary_key=True, autoincrement=True)
	section = Column(String(32), nullable=False)
	session_id = Column(String(128), nullable=False, index=True)
	# task1/task2, text1/text2 or part1/part2
	variant = Column(String(16), nullable=False)
	# Latest submission only; repeat submissions overwrite in place
	assignment = Column(Text, nullable=False)
	user_response = Column(Text, nullable=False)
	assessment_json = Column(Text, nullable=False)  # JSON string snapshot
	counter = Column(Integer, default=1, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

	__table_args__ = (UniqueConstraint("section", "session_id", name="uq_section_assessment"),)


class EmailSubscription(Base):
	__tablename__ = "email_subscriptions"
	id = Column(Integer, primary_key=True, autoincrement=True)
	email = Column(String(256), nullable=False)
	session_id = Column(String(128), nullable=False)
	section = Column(String(32), nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

	__table_args__ = (UniqueConstraint("email", "section", name="uq_subscription_email_section"),)
