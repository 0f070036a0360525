"""Arithmetic in the quadratic extension of the Mersenne prime field GF(2^61 - 1).

Elements are written ``real + img * i`` with ``i * i == -1``; since
2^61 - 1 is congruent to 3 modulo 4, this gives the field GF(p^2).
"""

from __future__ import annotations

import random as _random
from dataclasses import dataclass
from typing import Union

MOD = 2305843009213693951  # 2^61 - 1

#: log2 of the order of the generator used by :func:`get_root_of_unity`.
MAX_ORDER = 62

#: Largest ``log_order`` that :func:`get_root_of_unity` accepts.
MAX_LOG_ORDER = 61

_GENERATOR_REAL = 2147483648
_GENERATOR_IMG = 1033321771269002680

Operand = Union["FieldElement", int]


@dataclass(frozen=True, slots=True)
class FieldElement:
    """An element ``real + img * i`` of GF(p^2), reduced modulo ``MOD``."""

    real: int = 0
    img: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "real", self.real % MOD)
        object.__setattr__(self, "img", self.img % MOD)

    @staticmethod
    def _coerce(value: Operand) -> FieldElement:
        if isinstance(value, FieldElement):
            return value
        if isinstance(value, int):
            return FieldElement(value)
        return NotImplemented

    def __add__(self, other: Operand) -> FieldElement:
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return FieldElement(self.real + other.real, self.img + other.img)

    __radd__ = __add__

    def __sub__(self, other: Operand) -> FieldElement:
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return FieldElement(self.real - other.real, self.img - other.img)

    def __rsub__(self, other: Operand) -> FieldElement:
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return other - self

    def __mul__(self, other: Operand) -> FieldElement:
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return FieldElement(
            self.real * other.real - self.img * other.img,
            self.real * other.img + self.img * other.real,
        )

    __rmul__ = __mul__

    def __neg__(self) -> FieldElement:
        return FieldElement(-self.real, -self.img)

    def __truediv__(self, other: Operand) -> FieldElement:
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self * inv(other)

    def __pow__(self, exponent: int) -> FieldElement:
        return fast_pow(self, exponent)

    def __bool__(self) -> bool:
        return bool(self.real or self.img)

    def __repr__(self) -> str:
        return f"FieldElement(real={self.real}, img={self.img})"


ZERO = FieldElement(0)
ONE = FieldElement(1)


def random_element(rng: _random.Random | None = None) -> FieldElement:
    """Return an element with uniformly random real and imaginary parts."""
    rng = rng or _random
    return FieldElement(rng.randrange(MOD), rng.randrange(MOD))


def random_real_only(rng: _random.Random | None = None) -> FieldElement:
    """Return an element with a random real part and zero imaginary part."""
    rng = rng or _random
    return FieldElement(rng.randrange(MOD), 0)


def fast_pow(x: Operand, exponent: int) -> FieldElement:
    """Raise ``x`` to a non-negative integer power by square-and-multiply."""
    if exponent < 0:
        raise ValueError("exponent must be non-negative")
    base = FieldElement._coerce(x)
    if base is NotImplemented:
        raise TypeError(f"cannot raise {type(x).__name__} in the field")
    result = ONE
    while exponent:
        if exponent & 1:
            result = result * base
        base = base * base
        exponent >>= 1
    return result


def inv(x: Operand) -> FieldElement:
    """Return the multiplicative inverse of a non-zero element."""
    element = FieldElement._coerce(x)
    if element is NotImplemented:
        raise TypeError(f"cannot invert {type(x).__name__} in the field")
    if not element:
        raise ZeroDivisionError("zero has no inverse in the field")
    return fast_pow(element, MOD * MOD - 2)


def get_root_of_unity(log_order: int) -> FieldElement:
    """Return a primitive root of unity of order ``2 ** log_order``."""
    if not 0 <= log_order <= MAX_LOG_ORDER:
        raise ValueError(f"log_order must be between 0 and {MAX_LOG_ORDER}")
    root = FieldElement(_GENERATOR_REAL, _GENERATOR_IMG)
    for _ in range(MAX_ORDER - log_order):
        root = root * root
    return root