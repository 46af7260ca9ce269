"""
Coercion primitive — fonctions totales, ne lèvent jamais.

Toute valeur venue d'un JSON étranger passe par ici avant d'entrer dans
le modèle canonique : str / number / bool / choix fermé / listes.
"""
import math
import random
import string
from typing import Any, Dict, Iterable, List, Optional

_ID_ALPHABET = string.digits + string.ascii_lowercase


def to_str(value: Any, default: str = "") -> str:
    """None → default, bool → "true"/"false", 1.0 → "1", conteneurs → default."""
    if isinstance(value, str):
        return value
    if value is None:
        return default
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if not math.isfinite(value):
            return default
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (dict, list, tuple, set)):
        return default
    return str(value)


def to_str_or(value: Any, default: str) -> str:
    """Préfère la valeur présente, sinon le défaut."""
    if value is None:
        return default
    return to_str(value, default)


def to_number(value: Any, default: Optional[float] = 0) -> Optional[float]:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else default
    if isinstance(value, str) and value.strip():
        try:
            parsed = float(value.strip())
        except ValueError:
            return default
        if not math.isfinite(parsed):
            return default
        return int(parsed) if parsed.is_integer() else parsed
    return default


def to_bool(value: Any, default: bool = False) -> bool:
    return value if isinstance(value, bool) else default


def to_choice(value: Any, choices: Iterable[Any], default: Any) -> Any:
    return value if value in tuple(choices) else default


def to_str_list(value: Any, drop_empty: bool = False) -> List[str]:
    if not isinstance(value, list):
        return []
    items = [to_str(item) for item in value]
    return [item for item in items if item] if drop_empty else items


def as_dict(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, dict) else {}


def string_map(value: Any) -> Dict[str, str]:
    """dict quelconque → {str: str} (clés et valeurs coercées)."""
    if not isinstance(value, dict):
        return {}
    return {to_str(k): to_str(v) for k, v in value.items()}


def non_blank(value: Any) -> Optional[str]:
    """Chaîne non vide après strip, sinon None."""
    if isinstance(value, str) and value.strip():
        return value
    return None


def new_id(prefix: str) -> str:
    suffix = "".join(random.choice(_ID_ALPHABET) for _ in range(6))
    return f"{prefix}_{suffix}"
