"""
ORM — stockage clé-valeur des projets + instantanés.
Le document est sérialisé en JSON (forme camelCase de ProjectDocument).
"""
import uuid
import time

import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def now_ms() -> int:
    return int(time.time() * 1000)


class Base(DeclarativeBase):
    pass


class ProjectDB(Base):
    __tablename__ = "projects"
    id:         Mapped[str] = mapped_column(sa.String, primary_key=True)
    data:       Mapped[str] = mapped_column(sa.Text, nullable=False)
    updated_at: Mapped[int] = mapped_column(sa.BigInteger, default=now_ms)


class SnapshotDB(Base):
    __tablename__ = "snapshots"
    id:         Mapped[str] = mapped_column(sa.String, primary_key=True, default=lambda: str(uuid.uuid4()))
    project_id: Mapped[str] = mapped_column(sa.String, sa.ForeignKey("projects.id"), nullable=False, index=True)
    data:       Mapped[str] = mapped_column(sa.Text, nullable=False)
    created_at: Mapped[int] = mapped_column(sa.BigInteger, default=now_ms)
