"""
lp_studio — moteur d'échange et de normalisation des projets de landing pages.

normalize(raw)        → ProjectDocument canonique (SchemaError si irrécupérable)
decode(zip_bytes)     → DecodeResult(project, missing_assets, warnings)
encode(doc)           → octets du bundle ZIP
build_import_preview  → contrôle d'un import CSV de magasins
"""
__version__ = "0.1.0"

from .bundle import DecodeResult, EncodeOptions, decode, encode
from .core.schemas import ProjectDocument, Section, StoreTable
from .errors import AssetResolutionWarning, FormatError, LpStudioError, SchemaError
from .normalizer import dump_document, normalize
from .stores import build_import_preview, build_store_table, parse_csv
from .templates import REQUIRED_SECTION_TYPES, create_project_from_template, ensure_required_sections
