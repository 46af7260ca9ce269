"""
Erreurs typées du moteur d'échange de projets.

SchemaError  → document structurellement invalide (pas d'objet, meta/sections absents)
FormatError  → archive illisible ou sans manifest reconnu
AssetResolutionWarning → dégradation douce (asset introuvable), jamais levée
"""
from dataclasses import dataclass


class LpStudioError(ValueError):
    """Base des erreurs récupérables exposées à l'appelant."""


class SchemaError(LpStudioError):
    """Le document brut ne peut pas devenir un ProjectDocument."""


class FormatError(LpStudioError):
    """L'archive n'est pas au format bundle lp_studio."""


@dataclass(frozen=True)
class AssetResolutionWarning:
    asset_id: str
    path: str
    message: str = "asset introuvable dans l'archive"

    def to_dict(self) -> dict:
        return {"assetId": self.asset_id, "path": self.path, "message": self.message}
