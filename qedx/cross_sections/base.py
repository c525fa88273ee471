import logging
import string
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import numpy as np

from ..constants import CONSTANTS
from ..dirac import DiracMatrix, DiracSpinor
from ..kinematics import FourVector
from ..pauli import PauliMatrix

logger = logging.getLogger(__name__)


class CrossSection(ABC):
    """
    Base class for all reaction cross sections.

    Subclasses build the amplitude tensor (one axis of length 2 per external
    particle, in argument order) and the kinematic factor; the base class
    contracts the tensor with the spin-density matrices and applies
    (hbar c)^2 alpha^n. All implementations are pure: inputs are copied and
    nothing survives a call.
    """

    name: str = "abstract"
    description: str = ""
    units: str = ""
    incoming: tuple = ()    # one flag per argument, True for initial-state particles
    alpha_power: int = 2

    @abstractmethod
    def amplitudes(self, *particles) -> np.ndarray:
        """Complex amplitude tensor, coupling constants stripped."""

    @abstractmethod
    def kinematic_factor(self, *particles) -> float:
        """Flux, phase-space and 2pi factors for the returned differential."""

    def amplitude_squared(self, *particles) -> complex:
        """SDM-weighted spin sum of |M|^2 (without couplings)."""
        if len(particles) != len(self.incoming):
            raise ValueError(f"{self.name} takes {len(self.incoming)} particles, got {len(particles)}")
        amp = self.amplitudes(*particles)
        amp_sq = spin_sum(amp, [p.sdm for p in particles], self.incoming)
        if CONSTANTS.debug_checks:
            check_amplitude_squared(self.name, amp_sq, float(np.vdot(amp, amp).real))
        return amp_sq

    def __call__(self, *particles) -> float:
        particles = tuple(p.copy() for p in particles)
        amp_sq = self.amplitude_squared(*particles)
        kin = self.kinematic_factor(*particles)
        result = CONSTANTS.hbarc_sqr * CONSTANTS.alpha_qed ** self.alpha_power * amp_sq.real * kin
        logger.debug(f"{self.name}: |M|^2 = {amp_sq:.6e}, kinematic factor = {kin:.6e}, "
                     f"result = {result:.6e} {self.units}")
        return float(result)


def spin_sum(amp: np.ndarray, sdms: Sequence[PauliMatrix], incoming: Sequence[bool]) -> complex:
    """
    sum over h, hbar of amp[h] conj(amp[hbar]) prod_in rho[h, hbar] prod_out rho[hbar, h]

    Outgoing SDMs are detection efficiencies, hence the reversed index order.
    """
    n = amp.ndim
    kets, bras = string.ascii_lowercase[:n], string.ascii_uppercase[:n]
    terms = [kets, bras]
    operands = [amp, amp.conj()]
    for k, (sdm, is_in) in enumerate(zip(sdms, incoming)):
        rho = sdm.to_array()
        terms.append(kets[k] + bras[k])
        operands.append(rho if is_in else rho.T)
    return complex(np.einsum(",".join(terms) + "->", *operands))


def check_amplitude_squared(name: str, amp_sq: complex, scale: Optional[float] = None) -> bool:
    """
    Advisory: |M|^2 must come out real and non-negative. Logs, never raises.

    scale is the size rounding noise is measured against (the amplitude
    tensor's squared norm when called from a CrossSection, |amp_sq| by
    default). Deviations below imag_tolerance * scale, or below
    resolution^2 absolutely, are noise.
    """
    scale = abs(amp_sq) if scale is None else scale
    noise = max(CONSTANTS.imag_tolerance * scale, CONSTANTS.resolution ** 2)
    bad = amp_sq.real < -noise or abs(amp_sq.imag) > noise
    if bad:
        logger.warning(f"Bad {name} amplitudes: spin-summed |M|^2 = {amp_sq:.6e} "
                       f"should be real and non-negative")
    return not bad


def sandwich(bras: Sequence[DiracSpinor], chain: DiracMatrix, kets: Sequence[DiracSpinor]) -> np.ndarray:
    """2x2 array [i, j] = bras[i]-bar . chain . kets[j]."""
    return np.array([[bra.scalar_prod(chain @ ket) for ket in kets] for bra in bras])


def fermion_propagator(mom: FourVector, mass: float, denom: float) -> DiracMatrix:
    """(pslash + m) / denom; the denominator is not checked for zero."""
    return (DiracMatrix.slash(mom) + mass) / denom


def photon_propagator(q: FourVector) -> float:
    """1 / q^2 for the virtual photon; q^2 = 0 gives inf."""
    return np.float64(1.0) / q.invariant_sqr()
