"""
Base Pydantic tolérante.

CamelModel    → noms Python snake_case, JSON camelCase (alias_generator)
CoercedModel  → chaque champ est coercé selon son annotation avant validation ;
                valeur absente ou inutilisable → défaut du champ. Aucune
                entrée JSON ne peut faire échouer la validation.
"""
import types
from typing import Any, Dict, List, Literal, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from .coerce import as_dict, to_number, to_str

_MISSING = object()


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> Dict[str, Any]:
        """Forme JSON canonique : camelCase, None omis."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def coerce_value(annotation: Any, value: Any) -> Any:
    """Coerce `value` vers `annotation` ; retourne _MISSING si irrécupérable."""
    origin = get_origin(annotation)

    if origin is Union or origin is types.UnionType:
        if value is None:
            return None
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return coerce_value(args[0], value)
        return value

    if origin is Literal:
        return value if value in get_args(annotation) else _MISSING

    if origin in (list, List):
        if not isinstance(value, list):
            return _MISSING
        args = get_args(annotation)
        item_type = args[0] if args else Any
        items = [coerce_value(item_type, v) for v in value]
        return [item for item in items if item is not _MISSING]

    if origin in (dict, Dict):
        if not isinstance(value, dict):
            return _MISSING
        args = get_args(annotation)
        value_type = args[1] if len(args) == 2 else Any
        result = {}
        for key, entry in value.items():
            coerced = coerce_value(value_type, entry)
            if coerced is not _MISSING:
                result[to_str(key)] = coerced
        return result

    if annotation is str:
        if value is None or isinstance(value, (dict, list)):
            return _MISSING
        return to_str(value)
    if annotation is bool:
        return value if isinstance(value, bool) else _MISSING
    if annotation in (int, float):
        number = to_number(value, None)
        if number is None:
            return _MISSING
        return int(number) if annotation is int else number
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return value if isinstance(value, (dict, BaseModel)) else _MISSING
    return value


class CoercedModel(CamelModel):
    """Modèle dont la validation ne peut pas échouer sur une entrée JSON."""

    @classmethod
    def reshape(cls, raw: Dict[str, Any]) -> Dict[str, Any]:
        """Réécritures structurelles (alias legacy, tableaux ↔ objets) avant coercion."""
        return raw

    @model_validator(mode="before")
    @classmethod
    def _coerce_fields(cls, value: Any) -> Any:
        if isinstance(value, BaseModel):
            return value
        raw = cls.reshape(as_dict(value))
        result: Dict[str, Any] = {}
        for name, field in cls.model_fields.items():
            key = field.alias or name
            if key in raw:
                present = raw[key]
            elif name in raw:
                present = raw[name]
            else:
                continue
            coerced = coerce_value(field.annotation, present)
            if coerced is _MISSING:
                continue
            # un id vide ne remplace jamais un id généré
            if field.default_factory is not None and coerced == "":
                continue
            result[key] = coerced
        return result
