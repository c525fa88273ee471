"""
Dirac-matrix and Dirac-spinor algebra in the Dirac representation.

    g0 = diag(1, 1, -1, -1)        gk = [[0, sigma_k], [-sigma_k, 0]]

satisfying {g^mu, g^nu} = 2 g^{mu nu} I with metric (+,-,-,-).

Spinors are normalized covariantly: ubar u = 2m, vbar v = -2m.
"""

from __future__ import annotations
import math
from typing import Sequence
import numpy as np

from .kinematics import FourVector
from .pauli import SIGMA, PauliSpinor

_ZERO2 = np.zeros((2, 2), dtype=complex)
_ONE2 = np.identity(2, dtype=complex)

GAMMA = (
    np.block([[_ONE2, _ZERO2], [_ZERO2, -_ONE2]]),
    np.block([[_ZERO2, SIGMA[0]], [-SIGMA[0], _ZERO2]]),
    np.block([[_ZERO2, SIGMA[1]], [-SIGMA[1], _ZERO2]]),
    np.block([[_ZERO2, SIGMA[2]], [-SIGMA[2], _ZERO2]]),
)
GAMMA5 = 1j * GAMMA[0] @ GAMMA[1] @ GAMMA[2] @ GAMMA[3]

METRIC_SIGN = (1.0, -1.0, -1.0, -1.0)

HELICITIES = (+0.5, -0.5)


class DiracMatrix:
    """4x4 complex matrix acting on Dirac spinors."""

    def __init__(self, matrix=None):
        m = np.zeros((4, 4), dtype=complex) if matrix is None else np.array(matrix, dtype=complex)
        if m.shape != (4, 4):
            raise ValueError(f"DiracMatrix needs a 4x4 matrix, got shape {m.shape}")
        self._matrix = m

    @classmethod
    def identity(cls) -> "DiracMatrix":
        return cls(np.identity(4))

    @classmethod
    def gamma(cls, mu: int) -> "DiracMatrix":
        """Contravariant gamma^mu, mu = 0..3."""
        if not 0 <= mu <= 3:
            raise ValueError(f"Lorentz index must be in [0, 3], got {mu}")
        return cls(GAMMA[mu])

    @classmethod
    def gamma5(cls) -> "DiracMatrix":
        return cls(GAMMA5)

    @classmethod
    def slash(cls, p: FourVector) -> "DiracMatrix":
        """gamma.p = g0 p0 - g1 p1 - g2 p2 - g3 p3 (p may be complex)."""
        comps = p.to_array()
        return cls(sum(METRIC_SIGN[mu] * comps[mu] * GAMMA[mu] for mu in range(4)))

    @classmethod
    def from_array(cls, array) -> "DiracMatrix":
        return cls(array)

    def to_array(self) -> np.ndarray:
        return self._matrix.copy()

    def __getitem__(self, index) -> complex:
        return complex(self._matrix[index])

    def trace(self) -> complex:
        return complex(np.trace(self._matrix))

    def dagger(self) -> "DiracMatrix":
        return DiracMatrix(self._matrix.conj().T)

    def bar(self) -> "DiracMatrix":
        """g0 M^dagger g0"""
        return DiracMatrix(GAMMA[0] @ self._matrix.conj().T @ GAMMA[0])

    def allclose(self, other: "DiracMatrix", atol: float = 1e-12) -> bool:
        return bool(np.allclose(self._matrix, other._matrix, rtol=0.0, atol=atol))

    def __add__(self, other) -> "DiracMatrix":
        if isinstance(other, DiracMatrix):
            return DiracMatrix(self._matrix + other._matrix)
        # scalar: M + s I, e.g. the propagator numerator pslash + m
        return DiracMatrix(self._matrix + other * np.identity(4))

    __radd__ = __add__

    def __sub__(self, other) -> "DiracMatrix":
        if isinstance(other, DiracMatrix):
            return DiracMatrix(self._matrix - other._matrix)
        return DiracMatrix(self._matrix - other * np.identity(4))

    def __neg__(self) -> "DiracMatrix":
        return DiracMatrix(-self._matrix)

    def __mul__(self, factor: complex) -> "DiracMatrix":
        return DiracMatrix(self._matrix * factor)

    __rmul__ = __mul__

    def __truediv__(self, denom: float) -> "DiracMatrix":
        # unguarded: a zero denominator leaves inf/nan entries
        return DiracMatrix(self._matrix / np.float64(denom))

    def __matmul__(self, other):
        if isinstance(other, DiracMatrix):
            return DiracMatrix(self._matrix @ other._matrix)
        if isinstance(other, DiracSpinor):
            return DiracSpinor(self._matrix @ other.to_array())
        return NotImplemented

    def __repr__(self) -> str:
        return f"DiracMatrix({self._matrix!r})"


def anticommutator(a: DiracMatrix, b: DiracMatrix) -> DiracMatrix:
    return a @ b + b @ a


class DiracSpinor:
    """Four-component complex column spinor."""

    def __init__(self, components: Sequence[complex] = (0.0, 0.0, 0.0, 0.0)):
        arr = np.array(components, dtype=complex)
        if arr.shape != (4,):
            raise ValueError(f"DiracSpinor needs 4 components, got shape {arr.shape}")
        self._spinor = arr

    @staticmethod
    def _energy_factors(p: FourVector):
        """sqrt(E+m) and sqrt(E-m) = |p| / sqrt(E+m), stable for massless p."""
        mass = p.invariant()
        e_plus_m = float(p.E) + mass
        if e_plus_m <= 0:
            raise ValueError(f"Spinor needs positive energy, got {p}")
        a = math.sqrt(e_plus_m)
        return a, p.magnitude / a

    @staticmethod
    def _check_helicity(helicity: float):
        if helicity not in HELICITIES:
            raise ValueError(f"Helicity must be +0.5 or -0.5, got {helicity}")

    @classmethod
    def u(cls, p: FourVector, helicity: float) -> "DiracSpinor":
        """Particle solution of (pslash - m) u = 0 with the given helicity."""
        cls._check_helicity(helicity)
        a, b = cls._energy_factors(p)
        s = 1 if helicity > 0 else -1
        chi = PauliSpinor.helicity_state(p.vect, s).to_array()
        return cls(np.concatenate([a * chi, s * b * chi]))

    @classmethod
    def v(cls, p: FourVector, helicity: float) -> "DiracSpinor":
        """Antiparticle solution of (pslash + m) v = 0; its two-spinor has spin opposite to helicity."""
        cls._check_helicity(helicity)
        a, b = cls._energy_factors(p)
        s = -1 if helicity > 0 else 1
        chi = PauliSpinor.helicity_state(p.vect, s).to_array()
        return cls(np.concatenate([s * b * chi, a * chi]))

    @classmethod
    def from_array(cls, array) -> "DiracSpinor":
        return cls(array)

    def to_array(self) -> np.ndarray:
        return self._spinor.copy()

    def __getitem__(self, index: int) -> complex:
        return complex(self._spinor[index])

    def bar(self) -> np.ndarray:
        """Row spinor psi^dagger g0."""
        return np.conj(self._spinor) @ GAMMA[0]

    def scalar_prod(self, other: "DiracSpinor") -> complex:
        """Bilinear psibar . other; with other = M @ chi this is psibar M chi."""
        return complex(self.bar() @ other._spinor)

    def __add__(self, other: "DiracSpinor") -> "DiracSpinor":
        return DiracSpinor(self._spinor + other._spinor)

    def __sub__(self, other: "DiracSpinor") -> "DiracSpinor":
        return DiracSpinor(self._spinor - other._spinor)

    def __mul__(self, factor: complex) -> "DiracSpinor":
        return DiracSpinor(self._spinor * factor)

    __rmul__ = __mul__

    def __repr__(self) -> str:
        return "DiracSpinor(" + ", ".join(f"{c:.6f}" for c in self._spinor) + ")"
