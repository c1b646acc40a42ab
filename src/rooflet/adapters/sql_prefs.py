# src/rooflet/adapters/sql_prefs.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import UniqueConstraint
from sqlmodel import JSON, Column, Field, Session, SQLModel, create_engine, select


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PreferenceRow(SQLModel, table=True):
    __tablename__ = "preferences"
    __table_args__ = (UniqueConstraint("portfolio_id", "key"),)

    id: int | None = Field(default=None, primary_key=True)
    ts: datetime = Field(default_factory=_utcnow, index=True)

    portfolio_id: str = Field(index=True)
    key: str = Field(index=True)

    value: Any = Field(default=None, sa_column=Column(JSON))


class SqlPreferenceStore:
    """Key-value preferences, one row per (portfolio_id, key)."""

    def __init__(self, uri: str = "sqlite:///rooflet.db"):
        self.engine = create_engine(uri, echo=False)
        SQLModel.metadata.create_all(self.engine)

    def _find(self, session: Session, portfolio_id: str, key: str) -> PreferenceRow | None:
        stmt = select(PreferenceRow).where(
            PreferenceRow.portfolio_id == portfolio_id,
            PreferenceRow.key == key,
        )
        return session.exec(stmt).first()

    def get(self, portfolio_id: str, key: str) -> Any | None:
        with Session(self.engine) as session:
            row = self._find(session, portfolio_id, key)
            return row.value if row else None

    def set(self, portfolio_id: str, key: str, value: Any) -> None:
        with Session(self.engine) as session:
            row = self._find(session, portfolio_id, key)
            if row:
                row.value = value
                row.ts = _utcnow()
            else:
                row = PreferenceRow(portfolio_id=portfolio_id, key=key, value=value)
            session.add(row)
            session.commit()

    def clear(self, portfolio_id: str, key: str | None = None) -> None:
        with Session(self.engine) as session:
            stmt = select(PreferenceRow).where(PreferenceRow.portfolio_id == portfolio_id)
            if key is not None:
                stmt = stmt.where(PreferenceRow.key == key)
            for row in session.exec(stmt):
                session.delete(row)
            session.commit()
