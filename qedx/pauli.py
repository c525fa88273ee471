"""
Pauli (2x2 complex) algebra for spin-1/2 states and spin-density matrices.

PauliSpinor supplies the two-component helicity states the Dirac spinors are
built from; PauliMatrix is the spin-density matrix (SDM) every particle
carries.
"""

from __future__ import annotations
import math
import cmath
from typing import Sequence, Tuple, Union
import numpy as np

from .kinematics import ThreeVector

SIGMA = (
    np.array([[0, 1], [1, 0]], dtype=complex),
    np.array([[0, -1j], [1j, 0]], dtype=complex),
    np.array([[1, 0], [0, -1]], dtype=complex),
)


class PauliSpinor:
    """Two-component complex spinor."""

    def __init__(self, components: Sequence[complex] = (1.0, 0.0)):
        arr = np.array(components, dtype=complex)
        if arr.shape != (2,):
            raise ValueError(f"PauliSpinor needs 2 components, got shape {arr.shape}")
        self._spinor = arr

    @classmethod
    def helicity_state(cls, direction: ThreeVector, sign: int) -> "PauliSpinor":
        """
        Eigenstate of sigma.n with eigenvalue sign (+1 or -1), n = direction.

        Phases follow the usual polar-angle convention
            chi+ = (cos t/2, e^{i phi} sin t/2)
            chi- = (-e^{-i phi} sin t/2, cos t/2)
        A null direction is taken as +z.
        """
        if sign not in (1, -1):
            raise ValueError(f"Helicity sign must be +1 or -1, got {sign}")
        if direction.length_sqr() == 0:
            theta, phi = 0.0, 0.0
        else:
            theta, phi = direction.polar_angle(), direction.azimuth()
        c, s = math.cos(theta / 2), math.sin(theta / 2)
        if sign > 0:
            return cls((c, cmath.exp(1j * phi) * s))
        return cls((-cmath.exp(-1j * phi) * s, c))

    def to_array(self) -> np.ndarray:
        return self._spinor.copy()

    def __getitem__(self, index: int) -> complex:
        return complex(self._spinor[index])

    def dot(self, other: "PauliSpinor") -> complex:
        """Hermitian product <self|other>."""
        return complex(np.vdot(self._spinor, other._spinor))

    def norm(self) -> float:
        return math.sqrt(self.dot(self).real)

    def outer(self, other: "PauliSpinor") -> "PauliMatrix":
        """|self><other|"""
        return PauliMatrix(np.outer(self._spinor, np.conj(other._spinor)))

    def __add__(self, other: "PauliSpinor") -> "PauliSpinor":
        return PauliSpinor(self._spinor + other._spinor)

    def __mul__(self, factor: complex) -> "PauliSpinor":
        return PauliSpinor(self._spinor * factor)

    __rmul__ = __mul__

    def __repr__(self) -> str:
        return f"PauliSpinor({self._spinor[0]:.6f}, {self._spinor[1]:.6f})"


class PauliMatrix:
    """2x2 complex matrix; as an SDM, indices run over helicity +, - (or photon pol 1, 2)."""

    def __init__(self, matrix=None):
        m = np.zeros((2, 2), dtype=complex) if matrix is None else np.array(matrix, dtype=complex)
        if m.shape != (2, 2):
            raise ValueError(f"PauliMatrix needs a 2x2 matrix, got shape {m.shape}")
        self._matrix = m

    @classmethod
    def identity(cls) -> "PauliMatrix":
        return cls(np.identity(2))

    @classmethod
    def unpolarized(cls) -> "PauliMatrix":
        """Unit-trace SDM of an unpolarized state, I/2."""
        return cls(np.identity(2) / 2)

    @classmethod
    def sigma(cls, k: int) -> "PauliMatrix":
        """Pauli matrix sigma_k, k = 1, 2, 3."""
        if k not in (1, 2, 3):
            raise ValueError(f"Pauli index must be 1, 2 or 3, got {k}")
        return cls(SIGMA[k - 1])

    @classmethod
    def from_polarization(cls, pol: Union[ThreeVector, Sequence[float]]) -> "PauliMatrix":
        """SDM (I + P.sigma)/2 for polarization vector P, |P| <= 1."""
        p = pol.to_array() if isinstance(pol, ThreeVector) else np.asarray(pol, dtype=float)
        return cls((np.identity(2) + sum(p[k] * SIGMA[k] for k in range(3))) / 2)

    @classmethod
    def projector(cls, state: PauliSpinor) -> "PauliMatrix":
        """Pure-state SDM |chi><chi| / <chi|chi>."""
        return state.outer(state) / state.dot(state).real

    @classmethod
    def from_array(cls, array) -> "PauliMatrix":
        return cls(array)

    def to_array(self) -> np.ndarray:
        return self._matrix.copy()

    def __getitem__(self, index: Tuple[int, int]) -> complex:
        return complex(self._matrix[index])

    def trace(self) -> complex:
        return complex(np.trace(self._matrix))

    def dagger(self) -> "PauliMatrix":
        return PauliMatrix(self._matrix.conj().T)

    def is_hermitian(self, tol: float = 1e-12) -> bool:
        return bool(np.allclose(self._matrix, self._matrix.conj().T, rtol=0.0, atol=tol))

    def polarization(self) -> ThreeVector:
        """P_k = tr(rho sigma_k) / tr(rho)."""
        tr = self.trace().real
        return ThreeVector(*(float(np.trace(self._matrix @ s).real / tr) for s in SIGMA))

    def allclose(self, other: "PauliMatrix", atol: float = 1e-12) -> bool:
        return bool(np.allclose(self._matrix, other._matrix, rtol=0.0, atol=atol))

    def __add__(self, other: "PauliMatrix") -> "PauliMatrix":
        return PauliMatrix(self._matrix + other._matrix)

    def __sub__(self, other: "PauliMatrix") -> "PauliMatrix":
        return PauliMatrix(self._matrix - other._matrix)

    def __mul__(self, factor: complex) -> "PauliMatrix":
        return PauliMatrix(self._matrix * factor)

    __rmul__ = __mul__

    def __truediv__(self, factor: complex) -> "PauliMatrix":
        return PauliMatrix(self._matrix / factor)

    def __matmul__(self, other):
        if isinstance(other, PauliMatrix):
            return PauliMatrix(self._matrix @ other._matrix)
        if isinstance(other, PauliSpinor):
            return PauliSpinor(self._matrix @ other.to_array())
        return NotImplemented

    def __repr__(self) -> str:
        m = self._matrix
        return f"PauliMatrix([[{m[0, 0]:.6f}, {m[0, 1]:.6f}], [{m[1, 0]:.6f}, {m[1, 1]:.6f}]])"
