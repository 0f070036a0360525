"""Radix-2 number-theoretic transforms over the field, used for Reed-Solomon coding."""

from __future__ import annotations

import warnings
from collections.abc import Sequence

from gkrproof.field import ONE, ZERO, FieldElement, Operand, fast_pow, get_root_of_unity, inv
from gkrproof.utility import mylog

#: Transforms handle sizes ``2 ** k`` with ``k`` strictly below this bound.
MAX_TRANSFORM_LOG = 28


def _exact_log(value: int, what: str) -> int:
    if value > 0 and value & (value - 1) == 0 and value.bit_length() - 1 < MAX_TRANSFORM_LOG:
        return value.bit_length() - 1
    raise ValueError(
        f"{what} must be a power of two below 2**{MAX_TRANSFORM_LOG}, got {value}"
    )


class RSCodec:
    """Forward and inverse FFTs backed by precomputed twiddle factors.

    The twiddle tables hold the powers of the primitive root of unity of
    order ``order``; every transform size must divide that order.
    """

    def __init__(self, order: int) -> None:
        mylog(order)
        root = get_root_of_unity(mylog(order))
        inv_root = inv(root)
        twiddle = [ONE]
        inv_twiddle = [ONE]
        for _ in range(1, order):
            twiddle.append(twiddle[-1] * root)
            inv_twiddle.append(inv_twiddle[-1] * inv_root)
        self._size = order
        self._twiddle = tuple(twiddle)
        self._inv_twiddle = tuple(inv_twiddle)

    @property
    def size(self) -> int:
        """The order of the twiddle tables."""
        return self._size

    def fft(
        self,
        coefficients: Sequence[Operand],
        order: int,
        root_of_unity: FieldElement,
    ) -> list[FieldElement]:
        """Evaluate the polynomial with these coefficients at ``order`` roots of unity."""
        return self._transform(coefficients, order, root_of_unity, self._twiddle)

    def ifft(
        self,
        evaluations: Sequence[Operand],
        coef_len: int,
        order: int,
        root_of_unity: FieldElement,
    ) -> list[FieldElement]:
        """Recover ``coef_len`` coefficients from ``order`` evaluations."""
        if coef_len > order:
            warnings.warn(
                "inverse FFT requested with too few evaluations; "
                "the polynomial will have lower order than required",
                stacklevel=2,
            )
            coef_len = order
        _exact_log(order, "order")
        _exact_log(coef_len, "coefficient count")
        if len(evaluations) < order:
            raise ValueError(
                f"expected at least {order} evaluations, got {len(evaluations)}"
            )

        step = order // coef_len
        sub_eval = [evaluations[i * step] for i in range(coef_len)]
        new_root = fast_pow(root_of_unity, step)
        inv_root = fast_pow(new_root, coef_len - 1)
        if inv_root * new_root != ONE:
            raise ValueError("root of unity does not have the requested order")

        result = self._transform(sub_eval, coef_len, inv_root, self._inv_twiddle)
        inv_n = inv(coef_len)
        return [value * inv_n for value in result]

    def _transform(
        self,
        coefficients: Sequence[Operand],
        order: int,
        root_of_unity: FieldElement,
        twiddle: Sequence[FieldElement],
    ) -> list[FieldElement]:
        coef_len = len(coefficients)
        lg_order = _exact_log(order, "order")
        lg_coef = _exact_log(coef_len, "coefficient count")
        if fast_pow(root_of_unity, order) != ONE:
            raise ValueError("root of unity does not have the requested order")
        if lg_coef > lg_order:
            raise ValueError("more coefficients than evaluation points")
        if self._size % order:
            raise ValueError(
                f"transform size {order} does not divide codec size {self._size}"
            )

        current = [ZERO + c for c in coefficients] * (order // coef_len)
        for dep in range(lg_coef - 1, -1, -1):
            span = 1 << dep
            half = 1 << (lg_order - dep - 1)
            gap = (self._size // order) * span
            following = [ZERO] * order
            for k in range(half):
                x = twiddle[k * gap]
                base = k << (dep + 1)
                for j in range(span):
                    left = current[base | j]
                    right = x * current[base | span | j]
                    following[(k << dep) | j] = left + right
                    following[((k + half) << dep) | j] = left - right
            current = following
        return current