"""Immutable complex value used by the scalar escape-time evaluator."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Complex:
    """Complex number as a pair of floats.

    Operations return new values. Overflow is left to IEEE-754 and shows up
    as inf/nan components.
    """

    re: float
    im: float

    def add(self, other):
        return Complex(self.re + other.re, self.im + other.im)

    def multiply(self, other):
        return Complex(
            self.re * other.re - self.im * other.im,
            self.re * other.im + self.im * other.re,
        )

    def magnitude(self):
        return math.sqrt(self.re * self.re + self.im * self.im)

    def is_finite(self):
        return math.isfinite(self.re) and math.isfinite(self.im)

    __add__ = add
    __mul__ = multiply
    __abs__ = magnitude
