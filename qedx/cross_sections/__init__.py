"""
QED cross-section library for QEDX.

Usage:
    from qedx.cross_sections import compton, get_cross_section

    dsigma = compton(g_in, e_in, g_out, e_out)          # microbarn/sr
    dsigma = get_cross_section("compton")(g_in, e_in, g_out, e_out)
"""
from .base import CrossSection, spin_sum, check_amplitude_squared
from .compton import ComptonCrossSection, compton, klein_nishina
from .bremsstrahlung import BremsstrahlungCrossSection, bremsstrahlung
from .pair_production import PairProductionCrossSection, pair_production
from .triplet_production import TripletProductionCrossSection, triplet_production
from .ee_bremsstrahlung import EEBremsstrahlungCrossSection, ee_bremsstrahlung
from .registry import register, get_cross_section, list_registered_reactions

__all__ = [
    "CrossSection",
    "spin_sum",
    "check_amplitude_squared",
    "ComptonCrossSection",
    "BremsstrahlungCrossSection",
    "PairProductionCrossSection",
    "TripletProductionCrossSection",
    "EEBremsstrahlungCrossSection",
    "compton",
    "klein_nishina",
    "bremsstrahlung",
    "pair_production",
    "triplet_production",
    "ee_bremsstrahlung",
    "register",
    "get_cross_section",
    "list_registered_reactions",
]
