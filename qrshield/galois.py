"""
Galois Field GF(256) arithmetic.

Every Reed-Solomon computation in the encoder goes through the shared
``gf`` instance defined at the bottom of this module. Its tables are
constants once built, so sharing it is safe.
"""

from typing import List


class GF256:
    """
    Galois Field GF(2^8) arithmetic for QR codes.

    Uses the primitive polynomial: x^8 + x^4 + x^3 + x^2 + 1 (0x11d = 285)
    with generator alpha = 2.

    References:
    - https://en.wikipedia.org/wiki/Finite_field_arithmetic
    - https://research.swtch.com/field
    """

    PRIMITIVE_POLY = 0x11d  # x^8 + x^4 + x^3 + x^2 + 1 = 285

    def __init__(self):
        self.exp_table: List[int] = [0] * 512  # Extended so sums of logs need no modulo
        self.log_table: List[int] = [0] * 256
        self._built = False
        self.build_tables()

    def build_tables(self) -> None:
        """Build exponential and logarithm tables. Calling again is a no-op."""
        if self._built:
            return
        x = 1
        for i in range(255):
            self.exp_table[i] = x
            self.exp_table[i + 255] = x
            self.log_table[x] = i
            x = self._multiply_no_table(x, 2)
        self.log_table[0] = -1  # log(0) is undefined
        self._built = True

    def _multiply_no_table(self, a: int, b: int) -> int:
        """
        Multiply two GF(256) elements without using tables.
        Uses Russian peasant multiplication with polynomial reduction.
        """
        result = 0
        while b > 0:
            if b & 1:
                result ^= a
            b >>= 1
            a <<= 1
            if a & 0x100:
                a ^= self.PRIMITIVE_POLY
        return result

    def add(self, a: int, b: int) -> int:
        """Addition (and subtraction) in GF(256) is XOR."""
        return a ^ b

    def multiply(self, a: int, b: int) -> int:
        if a == 0 or b == 0:
            return 0
        return self.exp_table[self.log_table[a] + self.log_table[b]]

    def divide(self, a: int, b: int) -> int:
        if b == 0:
            raise ZeroDivisionError("Division by zero in GF(256)")
        if a == 0:
            return 0
        return self.exp_table[(self.log_table[a] - self.log_table[b]) % 255]

    def power(self, a: int, n: int) -> int:
        if a == 0:
            return 0 if n > 0 else 1
        return self.exp_table[(self.log_table[a] * n) % 255]

    def inverse(self, a: int) -> int:
        """Multiplicative inverse; a^(-1) = alpha^(255 - log a)."""
        if a == 0:
            raise ZeroDivisionError("No inverse for 0 in GF(256)")
        return self.exp_table[255 - self.log_table[a]]

    def alpha(self, n: int) -> int:
        """alpha^n for n >= 0."""
        return self.exp_table[n % 255]


gf = GF256()
