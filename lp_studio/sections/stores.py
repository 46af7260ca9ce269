"""Sections adossées à la table de magasins (liste filtrable, listes d'exclusion)."""
from typing import Any, Dict, List

from pydantic import Field

from ..core.model import CoercedModel
from .base import SectionData


class TargetStoresConfig(CoercedModel):
    label_keys: List[str] = Field(default_factory=list)
    filter_keys: List[str] = Field(default_factory=lambda: ["都道府県"])
    page_size: int = 10
    column_config: Dict[str, Any] = Field(default_factory=dict)


class TargetStoresData(SectionData):
    section_type = "targetStores"
    title: str = "対象店舗"
    note: str = ""
    placeholder: str = ""
    target_stores_config: TargetStoresConfig = Field(default_factory=TargetStoresConfig)


class ExcludedStoresListData(SectionData):
    section_type = "excludedStoresList"
    title: str = "対象外店舗一覧"
    highlight_label: str = "対象外"
    return_url: str = ""
    return_label: str = ""


class ExcludedBrandsListData(ExcludedStoresListData):
    section_type = "excludedBrandsList"
    title: str = "対象外ブランド一覧"
