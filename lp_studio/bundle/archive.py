"""
Contrat d'archive minimal au-dessus de zipfile.

load(bytes) → ArchiveHandle ; handle.file(path) → ArchiveEntry | None ;
entry.as_bytes() / entry.as_text(). Le reste du codec ne voit jamais zipfile.
"""
import io
import zipfile
import zlib
from typing import List, Optional

from ..errors import FormatError


class ArchiveEntry:
    def __init__(self, zf: zipfile.ZipFile, name: str):
        self._zf = zf
        self.name = name

    def as_bytes(self) -> bytes:
        """FormatError si l'entrée est corrompue, chiffrée ou compressée de façon non prise en charge."""
        try:
            return self._zf.read(self.name)
        except (zipfile.BadZipFile, zlib.error, RuntimeError, NotImplementedError) as exc:
            raise FormatError(f"{self.name} : entrée illisible ({exc})") from exc

    def as_text(self) -> str:
        # utf-8-sig : tolère un BOM en tête de fichier
        try:
            return self.as_bytes().decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise FormatError(f"{self.name} : texte UTF-8 invalide") from exc


class ArchiveHandle:
    def __init__(self, zf: zipfile.ZipFile):
        self._zf = zf
        self._names = {info.filename for info in zf.infolist() if not info.is_dir()}

    def names(self) -> List[str]:
        return sorted(self._names)

    def file(self, path: str) -> Optional[ArchiveEntry]:
        if path not in self._names:
            return None
        return ArchiveEntry(self._zf, path)


def load(data: bytes) -> ArchiveHandle:
    try:
        zf = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as exc:
        raise FormatError(f"archive ZIP illisible : {exc}") from exc
    return ArchiveHandle(zf)
