"""
QEDX: leading-order QED differential cross sections.

    from qedx import Lepton, Photon, compton

    e_in = Lepton.electron()
    g_in = Photon(0, 0, 1e-3)
    ...
    dsigma = compton(g_in, e_in, g_out, e_out)     # microbarn/sr
"""
from .constants import CONSTANTS, PhysicalConstants, load_constants
from .kinematics import FourVector, InvalidInvariantError, ThreeVector, UnitVector
from .lorentz import LorentzBoost, LorentzTransform, ThreeRotation
from .pauli import PauliMatrix, PauliSpinor
from .dirac import DiracMatrix, DiracSpinor
from .particles import Lepton, Particle, Photon
from .cross_sections import (
    bremsstrahlung,
    compton,
    ee_bremsstrahlung,
    get_cross_section,
    klein_nishina,
    list_registered_reactions,
    pair_production,
    triplet_production,
)

__version__ = "0.1.0"
