"""
External particles for the cross-section engine: a four-momentum plus a
2x2 spin-density matrix (SDM).

SDM indices: for leptons 0 -> helicity +1/2, 1 -> helicity -1/2; for photons
0 -> helicity +1 (eps(1)), 1 -> helicity -1 (eps(2)).

For an incoming particle the SDM is the state preparation (I/2 averages
over spins). For an outgoing particle it is a detection efficiency (I sums
over all final spins, a projector selects one state).
"""

from __future__ import annotations
import copy
import math
from typing import List, Optional, Union
import numpy as np

from .constants import CONSTANTS
from .dirac import HELICITIES, DiracSpinor
from .kinematics import FourVector, ThreeVector
from .pauli import PauliMatrix


class Particle:
    """Base for external lines: momentum and spin-density matrix."""

    mass: float = 0.0

    def __init__(self, mom: FourVector, sdm: Optional[PauliMatrix] = None):
        self.mom = mom
        self.sdm = sdm if sdm is not None else PauliMatrix.unpolarized()

    def copy(self) -> "Particle":
        return copy.deepcopy(self)

    # -------------------- Polarization --------------------

    def average_pol(self) -> "Particle":
        """SDM = I/2: unpolarized beam or target (spin average)."""
        self.sdm = PauliMatrix.unpolarized()
        return self

    def sum_pol(self) -> "Particle":
        """SDM = I: sum over all final-state polarizations."""
        self.sdm = PauliMatrix.identity()
        return self

    def set_sdm(self, sdm: Union[PauliMatrix, np.ndarray]) -> "Particle":
        self.sdm = sdm if isinstance(sdm, PauliMatrix) else PauliMatrix(sdm)
        return self

    # -------------------- Representation --------------------

    def __repr__(self) -> str:
        return f"{type(self).__name__}(mass={self.mass:.6f} GeV, mom={self.mom}, sdm={self.sdm})"


class Lepton(Particle):
    """Massive spin-1/2 fermion (electron, muon, ...)."""

    def __init__(self, mass: float, px=0.0, py=0.0, pz=0.0, sdm: Optional[PauliMatrix] = None):
        self.mass = float(mass)
        super().__init__(self.make_fourvector(px, py, pz), sdm)

    @classmethod
    def electron(cls, px=0.0, py=0.0, pz=0.0, sdm: Optional[PauliMatrix] = None) -> "Lepton":
        return cls(CONSTANTS.electron_mass, px, py, pz, sdm)

    @classmethod
    def muon(cls, px=0.0, py=0.0, pz=0.0, sdm: Optional[PauliMatrix] = None) -> "Lepton":
        return cls(CONSTANTS.muon_mass, px, py, pz, sdm)

    @classmethod
    def from_momentum(cls, mom: FourVector, mass: Optional[float] = None,
                      sdm: Optional[PauliMatrix] = None) -> "Lepton":
        """Keep mom as given (no on-shell projection); mass defaults to its invariant."""
        lepton = cls(mom.invariant() if mass is None else mass, sdm=sdm)
        lepton.mom = mom
        return lepton

    def make_fourvector(self, px, py, pz) -> FourVector:
        """Construct an on-shell FourVector from the rest mass and momentum components."""
        E = math.sqrt(self.mass**2 + px**2 + py**2 + pz**2)
        return FourVector(E, px, py, pz)

    def set_polarization(self, pol: Union[ThreeVector, List[float]]) -> "Lepton":
        """
        SDM = (I + P.sigma)/2 with P given in the helicity frame
        (P = (0, 0, +1) is pure helicity +1/2).
        """
        self.sdm = PauliMatrix.from_polarization(pol)
        return self

    def u_spinors(self) -> List[DiracSpinor]:
        """Particle spinors for helicity +1/2, -1/2 (SDM index order)."""
        return [DiracSpinor.u(self.mom, h) for h in HELICITIES]

    def v_spinors(self) -> List[DiracSpinor]:
        """Antiparticle spinors for helicity +1/2, -1/2 (SDM index order)."""
        return [DiracSpinor.v(self.mom, h) for h in HELICITIES]


class Photon(Particle):
    """Real photon; polarization basis is the helicity basis about its momentum."""

    def __init__(self, px=0.0, py=0.0, pz=0.0, sdm: Optional[PauliMatrix] = None):
        super().__init__(FourVector(math.sqrt(px**2 + py**2 + pz**2), px, py, pz), sdm)

    @classmethod
    def from_momentum(cls, mom: FourVector, sdm: Optional[PauliMatrix] = None) -> "Photon":
        photon = cls(sdm=sdm)
        photon.mom = mom
        return photon

    def _transverse_basis(self):
        """Real unit vectors e1 (in the theta direction) and e2 (phi direction)."""
        k = self.mom.vect
        if k.length_sqr() == 0:
            theta, phi = 0.0, 0.0
        else:
            theta, phi = k.polar_angle(), k.azimuth()
        ct, st, cp, sp = math.cos(theta), math.sin(theta), math.cos(phi), math.sin(phi)
        return np.array([ct * cp, ct * sp, -st]), np.array([-sp, cp, 0.0])

    def eps3(self, j: int) -> ThreeVector:
        """
        Spatial polarization vector for helicity +1 (j = 1) or -1 (j = 2):
            eps(+) = -(e1 + i e2)/sqrt(2),   eps(-) = (e1 - i e2)/sqrt(2)
        """
        e1, e2 = self._transverse_basis()
        if j == 1:
            return ThreeVector.from_array(-(e1 + 1j * e2) / math.sqrt(2))
        if j == 2:
            return ThreeVector.from_array((e1 - 1j * e2) / math.sqrt(2))
        raise ValueError(f"Photon polarization index must be 1 or 2, got {j}")

    def eps(self, j: int) -> FourVector:
        """Polarization four-vector (0, eps) for an incoming photon."""
        return FourVector.from_three(0j, self.eps3(j))

    def eps_star(self, j: int) -> FourVector:
        """Conjugate polarization four-vector for an outgoing photon."""
        return self.eps(j).conj()

    def set_polarization(self, pol: Union[ThreeVector, List[complex]]) -> "Photon":
        """
        Pure-state SDM for the transverse polarization vector pol (real for
        linear, complex for circular/elliptical). Components along k are
        dropped; rho_ij = c_i c_j^* with c_i = eps_i^dagger . pol.
        """
        e = pol.to_array() if isinstance(pol, ThreeVector) else np.asarray(pol, dtype=complex)
        c = np.array([np.vdot(self.eps3(j).to_array(), e) for j in (1, 2)])
        norm = float(np.vdot(c, c).real)
        if norm == 0:
            raise ValueError("Polarization vector has no transverse component.")
        self.sdm = PauliMatrix(np.outer(c, np.conj(c)) / norm)
        return self
