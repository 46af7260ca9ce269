"""
Bundles ZIP — import / export
Routes :
  POST /api/bundles/decode   (upload ZIP → projet + assets manquants + avertissements)
  POST /api/bundles/encode   (projet JSON → ZIP)
"""
import logging
import re
from typing import Any

from fastapi import APIRouter, Body, File, HTTPException, UploadFile
from fastapi.responses import Response

from ...bundle import decode, encode
from ...normalizer import normalize
from ._upload import read_upload

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Bundles"])


def _archive_name(project_name: str) -> str:
    slug = re.sub(r"[^a-z0-9\-_]+", "-", project_name, flags=re.IGNORECASE)
    slug = re.sub(r"-+", "-", slug).strip("-").lower()
    return f"{slug or 'project'}.zip"


@router.post("/bundles/decode")
def api_decode(file: UploadFile = File(...)):
    content = read_upload(file)
    try:
        result = decode(content)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return result.to_dict()


@router.post("/bundles/encode")
def api_encode(payload: Any = Body(...)):
    try:
        doc = normalize(payload)
    except ValueError as e:
        raise HTTPException(400, str(e))
    data = encode(doc)
    filename = _archive_name(doc.meta.project_name)
    return Response(
        content=data,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
