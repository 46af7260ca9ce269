"""
Normaliseurs de variantes de section.

SECTION_DATA_MODELS : type → modèle SectionData. Un type inconnu garde son
`data` tel quel (dict opaque) ; un type connu ne garde que ses propres clés.
"""
import logging
from typing import Any, Dict, Type

from ..core.card_style import SectionCardStyle
from ..core.coerce import as_dict, to_bool, to_str
from ..core.defaults import default_content
from ..core.schemas import Section, SectionContent, SectionStyle
from .base import SectionData
from .campaign import (
    BrandBarData, CampaignOverviewData, CampaignPeriodBarData, CouponFlowData, HeroImageData,
)
from .generic import CtaData, DividerData, FaqData, ImageTextData, TextBlockData
from .notes import FooterHtmlData, LegalNotesData, TabbedNotesData
from .ranking import PaymentHistoryGuideData, RankingTableData
from .stores import ExcludedBrandsListData, ExcludedStoresListData, TargetStoresData

log = logging.getLogger(__name__)

SECTION_DATA_MODELS: Dict[str, Type[SectionData]] = {
    model.section_type: model
    for model in (
        BrandBarData, HeroImageData, CampaignPeriodBarData, CampaignOverviewData, CouponFlowData,
        TargetStoresData, ExcludedStoresListData, ExcludedBrandsListData,
        LegalNotesData, FooterHtmlData, TabbedNotesData,
        RankingTableData, PaymentHistoryGuideData,
        TextBlockData, ImageTextData, CtaData, FaqData, DividerData,
    )
}

DEFAULT_SECTION_TYPE = "section"


def normalize_section_data(section_type: str, raw: Any) -> Dict[str, Any]:
    model = SECTION_DATA_MODELS.get(section_type)
    if model is None:
        return as_dict(raw)
    return model.normalize(raw)


def normalize_style(raw: Any) -> SectionStyle:
    return SectionStyle.model_validate(as_dict(raw))


def normalize_content(raw: Any) -> SectionContent:
    """Contenu absent ou non-objet → contenu par défaut (un item texte vide)."""
    if not isinstance(raw, dict):
        return default_content()
    return SectionContent.model_validate(raw)


def normalize_card_style(raw: Any) -> SectionCardStyle:
    return SectionCardStyle.model_validate(as_dict(raw))


def normalize_section(raw: Any, index: int) -> Section:
    """Section brute → Section complète ; `index` sert à synthétiser l'id."""
    entry = as_dict(raw)
    section_type = to_str(entry.get("type")) or DEFAULT_SECTION_TYPE
    section_id = to_str(entry.get("id")) or f"sec_{section_type}_{index}"
    if section_type not in SECTION_DATA_MODELS:
        log.debug("type de section inconnu %r : data conservé tel quel", section_type)
    name = entry.get("name")
    return Section(
        id=section_id,
        type=section_type,
        visible=to_bool(entry.get("visible"), True),
        locked=to_bool(entry.get("locked"), False),
        name=name if isinstance(name, str) else None,
        data=normalize_section_data(section_type, entry.get("data")),
        content=normalize_content(entry.get("content")),
        style=normalize_style(entry.get("style")),
        section_card_style=normalize_card_style(entry.get("sectionCardStyle")),
    )


__all__ = [
    "SECTION_DATA_MODELS", "SectionData",
    "normalize_section", "normalize_section_data",
    "normalize_style", "normalize_content", "normalize_card_style",
]
