"""
Cross-section registry: maps reaction names to CrossSection instances.

Names are case-insensitive, e.g. "compton", "TripletProduction".
"""
from .base import CrossSection
from .compton import COMPTON
from .bremsstrahlung import BREMSSTRAHLUNG
from .pair_production import PAIR_PRODUCTION
from .triplet_production import TRIPLET_PRODUCTION
from .ee_bremsstrahlung import EE_BREMSSTRAHLUNG


# Global registry: lower-cased reaction name -> CrossSection instance
_REGISTRY: dict = {}


def register(name: str, model: CrossSection):
    """
    Register a cross section under a reaction name.

    Example:
        >>> register("compton", ComptonCrossSection())
    """
    _REGISTRY[name.lower()] = model


def get_cross_section(name: str) -> CrossSection:
    """
    Resolve a reaction by name.

    Raises:
        ValueError: if nothing is registered under that name
    """
    try:
        return _REGISTRY[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown reaction '{name}'. Registered: {sorted(_REGISTRY)}") from None


def list_registered_reactions():
    """List all registered reactions with their units."""
    return {k: f"{v.name} [{v.units}]" for k, v in _REGISTRY.items()}


# ========== AUTO-REGISTER KNOWN REACTIONS ==========
for _model in (COMPTON, BREMSSTRAHLUNG, PAIR_PRODUCTION, TRIPLET_PRODUCTION, EE_BREMSSTRAHLUNG):
    register(_model.name, _model)
