"""Lecture bornée des fichiers uploadés."""
import os

from fastapi import HTTPException, UploadFile

MAX_UPLOAD_MB = int(os.getenv("LP_MAX_UPLOAD_MB", "50"))


def read_upload(file: UploadFile) -> bytes:
    content = file.file.read(MAX_UPLOAD_MB * 1024 * 1024 + 1)
    if len(content) > MAX_UPLOAD_MB * 1024 * 1024:
        raise HTTPException(413, f"Fichier trop volumineux (max {MAX_UPLOAD_MB} Mo)")
    if not content:
        raise HTTPException(400, "Fichier vide")
    return content
