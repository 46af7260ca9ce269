"""
Projets — normalisation, création depuis un template, persistance
Routes :
  POST /api/projects/normalize
  POST /api/projects/from-template
  GET  /api/projects/{project_id}
  PUT  /api/projects/{project_id}
  DELETE /api/projects/{project_id}
  GET  /api/projects/{project_id}/snapshots
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from ...core.model import CamelModel
from ...core.schemas import ProjectRecord
from ...database import (
    db_add_snapshot, db_delete_project, db_get_project, db_list_snapshots, db_put_project, get_db,
)
from ...models import now_ms
from ...normalizer import dump_document, normalize
from ...templates import TEMPLATE_OPTIONS, create_project_from_template, get_template

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Projects"])


class FromTemplateInput(CamelModel):
    template_id: str = "campaign"
    project_name: str = ""


@router.post("/projects/normalize")
def api_normalize(payload: Any = Body(...)):
    try:
        doc = normalize(payload)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return dump_document(doc)


@router.get("/templates")
def api_templates():
    return [t.model_dump() for t in TEMPLATE_OPTIONS]


@router.post("/projects/from-template")
def api_from_template(data: FromTemplateInput):
    template = get_template(data.template_id)
    if not template:
        raise HTTPException(404, f"Template {data.template_id} introuvable")
    doc = create_project_from_template(template.template_type, data.project_name, template.section_order)
    return dump_document(doc)


@router.get("/projects/{project_id}")
def api_get_project(project_id: str, db: Session = Depends(get_db)):
    record = db_get_project(db, project_id)
    if not record:
        raise HTTPException(404, f"Projet {project_id} introuvable")
    return record.to_json_dict()


@router.put("/projects/{project_id}")
def api_put_project(project_id: str, payload: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    try:
        doc = normalize(payload)
    except ValueError as e:
        raise HTTPException(400, str(e))
    previous = db_get_project(db, project_id)
    if previous:
        db_add_snapshot(db, project_id, previous.data)
    record = ProjectRecord(id=project_id, data=doc, updated_at=now_ms())
    db_put_project(db, record)
    log.info("projet %s enregistré (%d sections)", project_id, len(doc.sections))
    return {"id": project_id, "updatedAt": record.updated_at, "sectionCount": len(doc.sections)}


@router.delete("/projects/{project_id}")
def api_delete_project(project_id: str, db: Session = Depends(get_db)):
    if not db_delete_project(db, project_id):
        raise HTTPException(404, f"Projet {project_id} introuvable")
    log.info("projet %s supprimé", project_id)
    return {"deleted": project_id}


@router.get("/projects/{project_id}/snapshots")
def api_list_snapshots(project_id: str, db: Session = Depends(get_db)):
    return [{"id": s.id, "projectId": s.project_id, "createdAt": s.created_at}
            for s in db_list_snapshots(db, project_id)]
