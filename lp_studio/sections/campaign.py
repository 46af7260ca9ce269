"""Sections de campagne — bandeau marque, visuel principal, période, aperçu, parcours coupon."""
from typing import Any, Dict

from .base import SectionData, mirror_aliases


class BrandBarData(SectionData):
    section_type = "brandBar"
    logo_text: str = ""
    brand_text: str = ""

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        return mirror_aliases(raw, "logoText", "brandText")


class HeroImageData(SectionData):
    section_type = "heroImage"
    image_url: str = ""
    alt: str = ""
    alt_text: str = ""
    image_asset_id: str = ""

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        return mirror_aliases(raw, "alt", "altText")


class CampaignPeriodBarData(SectionData):
    section_type = "campaignPeriodBar"
    start_date: str = ""
    end_date: str = ""


class CampaignOverviewData(SectionData):
    section_type = "campaignOverview"
    title: str = ""
    body: str = ""


class CouponFlowData(SectionData):
    section_type = "couponFlow"
    title: str = "クーポン利用の流れ"
    lead: str = ""
    note: str = ""
    button_label: str = ""
    button_url: str = ""
