"""
Base des normaliseurs de variantes de section.

Chaque type de section connu déclare un modèle SectionData : ses champs
sont exactement les clés autorisées dans `data`, leurs annotations pilotent
la coercion (str / nombre / bool / Literal / listes), leurs défauts comblent
les absences. Les réécritures legacy passent par `reshape`.
"""
from typing import Any, ClassVar, Dict, Optional

from ..core.coerce import to_str
from ..core.model import CoercedModel


class SectionData(CoercedModel):
    """Sac `data` d'un type de section connu."""
    section_type: ClassVar[str] = ""

    @classmethod
    def normalize(cls, raw: Any) -> Dict[str, Any]:
        return cls.model_validate(raw).to_json_dict()


def first_present(raw: Dict[str, Any], *keys: str) -> Optional[Any]:
    """Première valeur non nulle parmi `keys` (alias legacy)."""
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def mirror_aliases(raw: Dict[str, Any], left: str, right: str) -> Dict[str, Any]:
    """Préfère la valeur présente, sinon recopie l'autre : `left` et `right` se réconcilient."""
    left_value = first_present(raw, left, right)
    right_value = first_present(raw, right, left)
    raw[left] = to_str(left_value)
    raw[right] = to_str(right_value)
    return raw


def indexed_default(raw: Dict[str, Any], key: str, default: str) -> Dict[str, Any]:
    """Remplace une valeur absente ou vide par un défaut positionnel (rank_1, tab_2…)."""
    if not to_str(raw.get(key)):
        raw[key] = default
    return raw
