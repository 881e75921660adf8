"""
Reed-Solomon error correction for QR codes.

References:
- https://en.wikipedia.org/wiki/Reed-Solomon_error_correction
- https://en.wikiversity.org/wiki/Reed-Solomon_codes_for_coders
"""

import logging
from typing import List, Sequence

from qrshield.config import MAX_GENERATOR_DEGREE
from qrshield.galois import GF256, gf

logger = logging.getLogger(__name__)


#==============================================================================
# POLYNOMIAL OPERATIONS OVER GF(256)
#==============================================================================

class Polynomial:
    """
    Polynomial with coefficients in GF(256).

    Coefficients are stored in ascending order of degree:
    coeffs[i] is the coefficient of x^i.
    """

    def __init__(self, coefficients: Sequence[int], gf_instance: GF256 = None):
        self.gf = gf_instance or gf
        self.coeffs = list(coefficients)
        # Trim zeros from the highest degree end
        while len(self.coeffs) > 1 and self.coeffs[-1] == 0:
            self.coeffs.pop()

    @property
    def degree(self) -> int:
        return len(self.coeffs) - 1

    def evaluate(self, x: int) -> int:
        """Evaluate polynomial at x using Horner's method."""
        result = 0
        for coeff in reversed(self.coeffs):
            result = self.gf.add(self.gf.multiply(result, x), coeff)
        return result

    def multiply(self, other: 'Polynomial') -> 'Polynomial':
        result = [0] * (len(self.coeffs) + len(other.coeffs) - 1)
        for i, a in enumerate(self.coeffs):
            for j, b in enumerate(other.coeffs):
                result[i + j] ^= self.gf.multiply(a, b)
        return Polynomial(result, self.gf)


#==============================================================================
# GENERATOR POLYNOMIALS AND ECC
#==============================================================================

class ReedSolomonEncoder:
    """
    Reed-Solomon encoder for QR code error correction.

    Generator polynomials are built incrementally once, up to
    ``max_degree``:

        g_1(x) = (x - alpha^0)
        g_n(x) = g_(n-1)(x) * (x - alpha^(n-1))

    In GF(256), subtraction equals addition, so each factor is stored as
    the coefficient list [alpha^(n-1), 1].
    """

    def __init__(self, gf_instance: GF256 = None, max_degree: int = MAX_GENERATOR_DEGREE):
        self.gf = gf_instance or gf
        self.max_degree = max_degree
        self._generators: List[Polynomial] = []
        self._build_generators()

    def _build_generators(self) -> None:
        gen = Polynomial([1], self.gf)
        self._generators.append(gen)
        for n in range(1, self.max_degree + 1):
            factor = Polynomial([self.gf.alpha(n - 1), 1], self.gf)
            gen = gen.multiply(factor)
            self._generators.append(gen)
        logger.debug("Built %d generator polynomials", self.max_degree)

    def generator(self, ecc_len: int) -> Polynomial:
        """Generator polynomial of degree ``ecc_len``."""
        self._check_length(ecc_len)
        return self._generators[ecc_len]

    def compute_ecc(self, data: Sequence[int], ecc_len: int) -> List[int]:
        """
        Compute ECC codewords for one block of data.

        Runs the message through a feedback shift register, which is
        polynomial long division by the generator keeping only the
        remainder.

        Args:
            data: Data codewords of the block (integers 0-255)
            ecc_len: Number of error correction codewords to generate

        Returns:
            List of ``ecc_len`` error correction codewords
        """
        coeffs = self.generator(ecc_len).coeffs
        ecc = [0] * ecc_len
        for byte in data:
            feedback = byte ^ ecc[0]
            if feedback:
                for j in range(ecc_len - 1):
                    ecc[j] = ecc[j + 1] ^ self.gf.multiply(feedback, coeffs[ecc_len - 1 - j])
                ecc[ecc_len - 1] = self.gf.multiply(feedback, coeffs[0])
            else:
                ecc[:-1] = ecc[1:]
                ecc[ecc_len - 1] = 0
        return ecc

    def syndromes(self, block: Sequence[int], ecc_len: int) -> List[int]:
        """
        Evaluate a full block (data followed by ECC) at alpha^0..alpha^(ecc_len-1).

        All syndromes are zero for an intact block.
        """
        self._check_length(ecc_len)
        # block[0] is the highest-degree coefficient
        poly = Polynomial(list(reversed(block)), self.gf)
        return [poly.evaluate(self.gf.alpha(i)) for i in range(ecc_len)]

    def _check_length(self, ecc_len: int) -> None:
        if not 1 <= ecc_len <= self.max_degree:
            raise ValueError(f"ECC length must be 1..{self.max_degree}, got {ecc_len}")


def max_correctable_errors(ecc_len: int) -> int:
    """Codeword errors a standard decoder can repair in one block."""
    return ecc_len // 2


rs_encoder = ReedSolomonEncoder()


def compute_ecc(data: Sequence[int], ecc_len: int) -> List[int]:
    return rs_encoder.compute_ecc(data, ecc_len)
