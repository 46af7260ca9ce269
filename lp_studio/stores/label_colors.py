"""
Couleurs de labels stables.

label_color(key)          → couleur fixe de la petite palette, dérivée d'un hash de la clé
unique_label_colors(keys) → une couleur distincte par clé (sondage linéaire dans la
                            grande palette, repli sur label_color quand elle est pleine)
"""
import unicodedata
from typing import Dict, List

DEFAULT_LABEL_COLORS = ["#DBEAFE", "#FEE2E2", "#DCFCE7", "#FEF3C7", "#E0F2FE", "#F3E8FF"]

RANDOM_LABEL_PALETTE = [
    "#F2B183", "#F0C27B", "#E9A8A0", "#D9A0E8", "#9FB7E9", "#89C6E5",
    "#7DCBB0", "#A5D66F", "#E6D26A", "#F0A3B0", "#CFA6EA", "#9BCED9",
]

_MODULUS = 2147483647


def _hash_key(value: str) -> int:
    normalized = unicodedata.normalize("NFKC", value).strip().lower()
    # unités UTF-16 : un caractère hors BMP compte deux fois
    raw = normalized.encode("utf-16-le")
    h = 0
    for i in range(0, len(raw), 2):
        h = (h * 31 + int.from_bytes(raw[i:i + 2], "little")) % _MODULUS
    return h


def label_color(key: str) -> str:
    if not key:
        return DEFAULT_LABEL_COLORS[0]
    return DEFAULT_LABEL_COLORS[_hash_key(key) % len(DEFAULT_LABEL_COLORS)]


def unique_label_colors(keys: List[str]) -> Dict[str, str]:
    size = len(RANDOM_LABEL_PALETTE)
    used = set()
    result = {}
    for key in keys:
        index = _hash_key(key or "default") % size
        attempts = 0
        while index in used and attempts < size:
            index = (index + 1) % size
            attempts += 1
        result[key] = label_color(key) if index in used else RANDOM_LABEL_PALETTE[index]
        used.add(index)
    return result
