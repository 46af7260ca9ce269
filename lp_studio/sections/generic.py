"""Blocs génériques : texte, image + texte, appel à l'action, FAQ, séparateur."""
from typing import List, Literal

from pydantic import Field

from ..core.model import CoercedModel
from .base import SectionData


class TextBlockData(SectionData):
    section_type = "textBlock"
    title: str = ""
    body: str = ""


class ImageTextData(SectionData):
    section_type = "imageText"
    title: str = ""
    body: str = ""
    image_url: str = ""
    align: Literal["left", "right"] = "left"


class CtaData(SectionData):
    section_type = "cta"
    headline: str = ""
    subtext: str = ""
    button_text: str = ""
    button_url: str = ""


class FaqEntry(CoercedModel):
    q: str = ""
    a: str = ""


class FaqData(SectionData):
    section_type = "faq"
    title: str = ""
    items: List[FaqEntry] = Field(default_factory=list)


class DividerData(SectionData):
    section_type = "divider"
    label: str = ""
