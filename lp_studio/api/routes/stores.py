"""
Table de magasins — aperçu d'import CSV
Routes :
  POST /api/stores/preview   (upload CSV + previewSize → aperçu + table canonique)
"""
import logging

from fastapi import APIRouter, File, Form, UploadFile

from ...core.schemas import CanonicalKeys
from ...stores import (
    build_import_preview, build_store_table, decode_csv_bytes, parse_csv, rows_to_records,
    store_label_defaults,
)
from ...stores.import_preview import PREVIEW_SIZE
from ._upload import read_upload

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Stores"])


@router.post("/stores/preview")
def api_store_preview(
    file: UploadFile = File(...),
    previewSize: int = Form(PREVIEW_SIZE),
):
    parsed = parse_csv(decode_csv_bytes(read_upload(file)))
    records = rows_to_records(parsed.headers, parsed.rows)
    preview = build_import_preview(
        parsed.headers, records, CanonicalKeys().as_list(), preview_size=previewSize,
    )
    table = build_store_table(parsed.headers, records)
    log.info(
        "aperçu CSV %s : %d lignes, %d invalides, %d doublons",
        file.filename, preview.summary.total_rows,
        preview.summary.invalid_rows, preview.summary.duplicate_id_count,
    )
    return {
        "preview": preview.to_json_dict(),
        "storeTable": table.to_json_dict(),
        "storeLabels": store_label_defaults(table),
    }
