"""SQLite — init + session + helpers de persistance des projets"""
import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from .core.schemas import ProjectDocument, ProjectRecord
from .models import Base, ProjectDB, SnapshotDB, now_ms
from .normalizer import dump_document, normalize

log = logging.getLogger(__name__)

DB_PATH      = os.getenv("LP_DB_PATH", str(Path("data") / "lp_studio.db"))
ENGINE       = None
SessionLocal = None


def configure(db_path: Optional[str] = None):
    """(Re)lie le moteur à `db_path` ; appelé à l'import puis par les tests."""
    global DB_PATH, ENGINE, SessionLocal
    DB_PATH = db_path or DB_PATH
    Path(DB_PATH).parent.mkdir(parents=True, exist_ok=True)
    ENGINE = create_engine(f"sqlite:///{DB_PATH}", connect_args={"check_same_thread": False})
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=ENGINE)


def init_db(db_path: Optional[str] = None):
    if db_path or ENGINE is None:
        configure(db_path)
    Base.metadata.create_all(bind=ENGINE)
    log.info("base projets prête : %s", DB_PATH)


def get_db():
    if SessionLocal is None:
        configure()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ── JSON helpers ──
def jd(doc: ProjectDocument) -> str:
    return json.dumps(dump_document(doc), ensure_ascii=False)


def jl(text: str) -> ProjectDocument:
    """Relit un document stocké ; il repasse par le normaliseur."""
    return normalize(json.loads(text))


# ── Projects ──
def db_get_project(db: Session, project_id: str) -> Optional[ProjectRecord]:
    row = db.get(ProjectDB, project_id)
    if row is None:
        return None
    return ProjectRecord(id=row.id, data=jl(row.data), updated_at=row.updated_at)


def db_put_project(db: Session, record: ProjectRecord) -> str:
    row = db.get(ProjectDB, record.id)
    if row is None:
        row = ProjectDB(id=record.id)
        db.add(row)
    row.data = jd(record.data)
    row.updated_at = record.updated_at or now_ms()
    db.commit()
    return record.id


def db_delete_project(db: Session, project_id: str) -> bool:
    row = db.get(ProjectDB, project_id)
    if row is None:
        return False
    db.query(SnapshotDB).filter(SnapshotDB.project_id == project_id).delete()
    db.delete(row)
    db.commit()
    return True


# ── Snapshots ──
def db_add_snapshot(db: Session, project_id: str, doc: ProjectDocument) -> SnapshotDB:
    obj = SnapshotDB(project_id=project_id, data=jd(doc))
    db.add(obj); db.commit(); db.refresh(obj); return obj


def db_list_snapshots(db: Session, project_id: str) -> List[SnapshotDB]:
    return (db.query(SnapshotDB)
              .filter(SnapshotDB.project_id == project_id)
              .order_by(SnapshotDB.created_at.desc(), SnapshotDB.id)
              .all())
