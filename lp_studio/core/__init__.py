from .card_style import SECTION_CARD_PRESETS, SectionCardStyle
from .defaults import default_content, default_settings, now_iso
from .schemas import (
    AssetMeta, AssetRecord, CanonicalKeys, ProjectDocument, ProjectMeta, ProjectRecord,
    Section, SectionContent, SectionStyle, StoreTable,
)
