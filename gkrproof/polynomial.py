"""Univariate polynomials of low degree with coefficients in the field."""

from __future__ import annotations

from dataclasses import dataclass

from gkrproof.field import ZERO, FieldElement, Operand


@dataclass(frozen=True)
class LinearPoly:
    """The polynomial ``a * x + b``."""

    a: FieldElement = ZERO
    b: FieldElement = ZERO

    @classmethod
    def constant(cls, value: Operand) -> LinearPoly:
        return cls(ZERO, ZERO + value)

    def __add__(self, other: LinearPoly) -> LinearPoly:
        return LinearPoly(self.a + other.a, self.b + other.b)

    def __mul__(self, other: LinearPoly) -> QuadraticPoly:
        return QuadraticPoly(
            self.a * other.a,
            self.a * other.b + self.b * other.a,
            self.b * other.b,
        )

    def eval(self, x: Operand) -> FieldElement:
        return self.a * x + self.b


@dataclass(frozen=True)
class QuadraticPoly:
    """The polynomial ``a * x^2 + b * x + c``."""

    a: FieldElement = ZERO
    b: FieldElement = ZERO
    c: FieldElement = ZERO

    def __add__(self, other: QuadraticPoly) -> QuadraticPoly:
        return QuadraticPoly(self.a + other.a, self.b + other.b, self.c + other.c)

    def __mul__(self, other: LinearPoly) -> CubicPoly:
        return CubicPoly(
            self.a * other.a,
            self.a * other.b + self.b * other.a,
            self.b * other.b + self.c * other.a,
            self.c * other.b,
        )

    def eval(self, x: Operand) -> FieldElement:
        return (self.a * x + self.b) * x + self.c


@dataclass(frozen=True)
class CubicPoly:
    """The polynomial ``a * x^3 + b * x^2 + c * x + d``."""

    a: FieldElement = ZERO
    b: FieldElement = ZERO
    c: FieldElement = ZERO
    d: FieldElement = ZERO

    def __add__(self, other: CubicPoly) -> CubicPoly:
        return CubicPoly(
            self.a + other.a, self.b + other.b, self.c + other.c, self.d + other.d
        )

    def eval(self, x: Operand) -> FieldElement:
        return ((self.a * x + self.b) * x + self.c) * x + self.d


@dataclass(frozen=True)
class QuadruplePoly:
    """The polynomial of degree four with coefficients ``a`` (leading) to ``e``."""

    a: FieldElement = ZERO
    b: FieldElement = ZERO
    c: FieldElement = ZERO
    d: FieldElement = ZERO
    e: FieldElement = ZERO

    def __add__(self, other: QuadruplePoly) -> QuadruplePoly:
        return QuadruplePoly(
            self.a + other.a,
            self.b + other.b,
            self.c + other.c,
            self.d + other.d,
            self.e + other.e,
        )

    def eval(self, x: Operand) -> FieldElement:
        return (((self.a * x + self.b) * x + self.c) * x + self.d) * x + self.e


@dataclass(frozen=True)
class QuintuplePoly:
    """The polynomial of degree five with coefficients ``a`` (leading) to ``f``."""

    a: FieldElement = ZERO
    b: FieldElement = ZERO
    c: FieldElement = ZERO
    d: FieldElement = ZERO
    e: FieldElement = ZERO
    f: FieldElement = ZERO

    def __add__(self, other: QuintuplePoly) -> QuintuplePoly:
        return QuintuplePoly(
            self.a + other.a,
            self.b + other.b,
            self.c + other.c,
            self.d + other.d,
            self.e + other.e,
            self.f + other.f,
        )

    def eval(self, x: Operand) -> FieldElement:
        return (
            (((self.a * x + self.b) * x + self.c) * x + self.d) * x + self.e
        ) * x + self.f