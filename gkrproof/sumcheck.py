"""The prover side of the layer-by-layer sum-check protocol."""

from __future__ import annotations

import warnings
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from gkrproof.circuit import GateType, LayeredCircuit, evaluate_circuit
from gkrproof.field import ONE, ZERO, FieldElement, Operand
from gkrproof.polynomial import LinearPoly, QuadraticPoly


def _elements(values: Iterable[Operand]) -> tuple[FieldElement, ...]:
    return tuple(ZERO + x for x in values)


def _eq_table(
    scale: FieldElement,
    r: Sequence[FieldElement],
    one_minus_r: Sequence[FieldElement],
) -> tuple[FieldElement, ...]:
    """Table of ``scale * eq(bits(j), r)``, bit ``i`` of ``j`` matching ``r[i]``."""
    table = [scale]
    for high, low in zip(r, one_minus_r):
        table = [t * low for t in table] + [t * high for t in table]
    return tuple(table)


@dataclass(frozen=True)
class _SplitEq:
    """An equality table stored as two half tables over the low and high bits."""

    low: tuple[FieldElement, ...]
    high: tuple[FieldElement, ...]
    shift: int

    @classmethod
    def build(
        cls,
        scale: FieldElement,
        r: Sequence[FieldElement],
        one_minus_r: Sequence[FieldElement],
        length: int,
    ) -> _SplitEq:
        if len(r) < length or len(one_minus_r) < length:
            raise ValueError(f"need at least {length} random values")
        first_half = length >> 1
        return cls(
            _eq_table(scale, r[:first_half], one_minus_r[:first_half]),
            _eq_table(ONE, r[first_half:length], one_minus_r[first_half:length]),
            first_half,
        )

    def __getitem__(self, index: int) -> FieldElement:
        return self.low[index & ((1 << self.shift) - 1)] * self.high[index >> self.shift]


def _fold(
    polys: Sequence[LinearPoly], total: int, previous_random: FieldElement, current_bit: int
) -> list[LinearPoly]:
    """Fix the previous variable and expose the next one as a linear polynomial."""
    folded = []
    for lo, hi in zip(polys[0:total:2], polys[1:total:2]):
        if current_bit == 0:
            b = lo.b
            a = hi.b - b
        else:
            b = lo.eval(previous_random)
            a = hi.eval(previous_random) - b
        folded.append(LinearPoly(a, b))
    return folded


def _unsupported(ty: GateType) -> None:
    warnings.warn(f"unsupported gate type {ty!r} in sum-check", RuntimeWarning, stacklevel=3)


class ZKProver:
    """Evaluates a layered circuit and answers the sum-check rounds for one layer."""

    def __init__(self, circuit: LayeredCircuit) -> None:
        self.circuit = circuit
        self.circuit_value: list[list[FieldElement]] = []
        self.v_u = ZERO
        self.v_v = ZERO
        self._inputs: list[FieldElement] | None = None
        self._layer_id: int | None = None
        self._length_g = 0
        self._length_u = 0
        self._length_v = 0
        self._alpha = ZERO
        self._beta = ZERO
        self._r_0: tuple[FieldElement, ...] = ()
        self._r_1: tuple[FieldElement, ...] = ()
        self._one_minus_r_0: tuple[FieldElement, ...] = ()
        self._one_minus_r_1: tuple[FieldElement, ...] = ()
        self._beta_g_r0: _SplitEq | None = None
        self._beta_g_r1: _SplitEq | None = None
        self._v_mult_add: list[LinearPoly] = []
        self._addv_array: list[LinearPoly] = []
        self._add_mult_sum: list[LinearPoly] = []
        self._total_uv = 0

    def get_witness(self, inputs: Iterable[Operand]) -> None:
        """Set the values of the input layer; missing wires are zero."""
        values = list(_elements(inputs))
        size = self.circuit[0].size
        if len(values) > size:
            raise ValueError(f"{len(values)} inputs do not fit a layer of {size} wires")
        self._inputs = values + [ZERO] * (size - len(values))

    def evaluate(self) -> list[FieldElement]:
        """Evaluate every layer and return the values of the output layer."""
        if self._inputs is None:
            raise RuntimeError("the witness must be set before evaluation")
        self.circuit_value = evaluate_circuit(self.circuit, self._inputs)
        return self.circuit_value[-1]

    def sumcheck_init(
        self,
        layer_id: int,
        bit_length_g: int,
        bit_length_u: int,
        bit_length_v: int,
        alpha: Operand,
        beta: Operand,
        r_0: Sequence[Operand],
        r_1: Sequence[Operand],
        one_minus_r_0: Sequence[Operand],
        one_minus_r_1: Sequence[Operand],
    ) -> None:
        """Prepare a sum-check over layer ``layer_id`` for ``alpha*V(r_0) + beta*V(r_1)``."""
        if not self.circuit_value:
            raise RuntimeError("the circuit must be evaluated before the sum-check")
        if not 1 <= layer_id < self.circuit.total_depth:
            raise ValueError(
                f"layer_id must be between 1 and {self.circuit.total_depth - 1}"
            )
        self._layer_id = layer_id
        self._length_g = bit_length_g
        self._length_u = bit_length_u
        self._length_v = bit_length_v
        self._alpha = ZERO + alpha
        self._beta = ZERO + beta
        self._r_0 = _elements(r_0)
        self._r_1 = _elements(r_1)
        self._one_minus_r_0 = _elements(one_minus_r_0)
        self._one_minus_r_1 = _elements(one_minus_r_1)

    def _require_init(self) -> int:
        if self._layer_id is None:
            raise RuntimeError("sumcheck_init must be called first")
        return self._layer_id

    def _gate_weight(self, index: int) -> FieldElement:
        return self._beta_g_r0[index] + self._beta_g_r1[index]

    def sumcheck_phase1_init(self) -> None:
        """Build the tables for the rounds over the ``u`` variables."""
        layer_id = self._require_init()
        self._beta_g_r0 = _SplitEq.build(
            self._alpha, self._r_0, self._one_minus_r_0, self._length_g
        )
        self._beta_g_r1 = _SplitEq.build(
            self._beta, self._r_1, self._one_minus_r_1, self._length_g
        )
        below = self.circuit_value[layer_id - 1]
        mult = [ZERO] * len(below)
        addv = [ZERO] * len(below)
        layer = self.circuit[layer_id]

        for i, gate in enumerate(layer.gates[: 1 << self._length_g]):
            ty, u, v = gate.ty, gate.u, gate.v
            if ty is GateType.DUMMY:
                continue
            if ty is GateType.DIRECT_RELAY:
                mult[u] += self._gate_weight(u)
                continue
            tmp = self._gate_weight(i)
            if ty is GateType.ADD:
                addv[u] += below[v] * tmp
                mult[u] += tmp
            elif ty is GateType.MULT:
                mult[u] += below[v] * tmp
            elif ty is GateType.SUM:
                for j in range(u, v):
                    mult[j] += tmp
            elif ty is GateType.EXP_SUM:
                for j in range(u, v + 1):
                    mult[j] += tmp
                    tmp = tmp + tmp
            elif ty is GateType.CUSTOM_COMB:
                for src, weight in zip(gate.src, gate.weight):
                    mult[src] += weight * tmp
            elif ty is GateType.NOT:
                mult[u] -= tmp
                addv[u] += tmp
            elif ty is GateType.MINUS:
                addv[u] -= below[v] * tmp
                mult[u] += tmp
            elif ty is GateType.XOR:
                tmp_v = tmp * below[v]
                addv[u] += tmp_v
                mult[u] += tmp - tmp_v - tmp_v
            elif ty is GateType.BIT_TEST:
                mult[u] += tmp - tmp * below[v]
            elif ty is GateType.NAAB:
                tmp_v = tmp * below[v]
                addv[u] += tmp_v
                mult[u] -= tmp_v
            elif ty is GateType.RELAY:
                mult[u] += tmp
            else:
                _unsupported(ty)

        self._v_mult_add = [LinearPoly(ZERO, x) for x in below]
        self._addv_array = [LinearPoly(ZERO, x) for x in addv]
        self._add_mult_sum = [LinearPoly(ZERO, x) for x in mult]
        self._total_uv = len(below)

    def _round(self, previous_random: Operand, current_bit: int) -> QuadraticPoly:
        if self._total_uv < 2:
            raise RuntimeError("no variables are left in this phase")
        r = ZERO + previous_random
        total = self._total_uv
        self._v_mult_add = _fold(self._v_mult_add, total, r, current_bit)
        self._addv_array = _fold(self._addv_array, total, r, current_bit)
        self._add_mult_sum = _fold(self._add_mult_sum, total, r, current_bit)
        terms = (
            QuadraticPoly(
                m.a * v.a,
                m.a * v.b + m.b * v.a + d.a,
                m.b * v.b + d.b,
            )
            for m, v, d in zip(self._add_mult_sum, self._v_mult_add, self._addv_array)
        )
        result = sum(terms, QuadraticPoly())
        self._total_uv >>= 1
        return result

    def sumcheck_phase1_update(
        self, previous_random: Operand, current_bit: int
    ) -> QuadraticPoly:
        """Answer one round over the ``u`` variables."""
        self._require_init()
        return self._round(previous_random, current_bit)

    def sumcheck_phase2_init(
        self,
        previous_random: Operand,
        r_u: Sequence[Operand],
        one_minus_r_u: Sequence[Operand],
    ) -> None:
        """Fix ``u`` to ``r_u`` and build the tables for the ``v`` variables."""
        layer_id = self._require_init()
        if not self._v_mult_add or self._beta_g_r0 is None:
            raise RuntimeError("phase one must run before phase two")
        v_u = self._v_mult_add[0].eval(previous_random)
        self.v_u = v_u
        beta_u = _SplitEq.build(
            ONE, _elements(r_u), _elements(one_minus_r_u), self._length_u
        )

        below = self.circuit_value[layer_id - 1]
        layer = self.circuit[layer_id]
        mult = [ZERO] * len(below)
        addv = [ZERO] * len(below)

        for i, gate in enumerate(layer.gates):
            ty, u, v = gate.ty, gate.u, gate.v
            if ty in (GateType.DUMMY, GateType.DIRECT_RELAY):
                continue
            tmp_g = self._gate_weight(i)
            if ty is GateType.SUM:
                tmp_g_vu = tmp_g * v_u
                for j in range(u, v):
                    addv[0] += tmp_g_vu * beta_u[j]
                continue
            if ty is GateType.EXP_SUM:
                tmp_g_vu = tmp_g * v_u
                for j in range(u, v + 1):
                    addv[0] += tmp_g_vu * beta_u[j]
                    tmp_g_vu = tmp_g_vu + tmp_g_vu
                continue
            if ty is GateType.CUSTOM_COMB:
                tmp_g_vu = tmp_g * v_u
                for src, weight in zip(gate.src, gate.weight):
                    addv[0] += tmp_g_vu * beta_u[src] * weight
                continue

            if ty not in (
                GateType.ADD,
                GateType.MULT,
                GateType.NOT,
                GateType.MINUS,
                GateType.XOR,
                GateType.BIT_TEST,
                GateType.NAAB,
                GateType.RELAY,
            ):
                _unsupported(ty)
                continue
            tmp = tmp_g * beta_u[u]
            tmp_v_u = tmp * v_u
            if ty is GateType.MULT:
                mult[v] += tmp_v_u
            elif ty is GateType.ADD:
                mult[v] += tmp
                addv[v] += tmp_v_u
            elif ty is GateType.NOT:
                addv[v] += tmp - tmp_v_u
            elif ty is GateType.MINUS:
                mult[v] -= tmp
                addv[v] += tmp_v_u
            elif ty is GateType.XOR:
                mult[v] += tmp - tmp_v_u - tmp_v_u
                addv[v] += tmp_v_u
            elif ty is GateType.BIT_TEST:
                mult[v] -= tmp_v_u
                addv[v] += tmp_v_u
            elif ty is GateType.NAAB:
                mult[v] += tmp - tmp_v_u
            else:
                addv[v] += tmp_v_u

        self._v_mult_add = [LinearPoly(ZERO, x) for x in below]
        self._addv_array = [LinearPoly(ZERO, x) for x in addv]
        self._add_mult_sum = [LinearPoly(ZERO, x) for x in mult]
        self._total_uv = len(below)

    def sumcheck_phase2_update(
        self, previous_random: Operand, current_bit: int
    ) -> QuadraticPoly:
        """Answer one round over the ``v`` variables."""
        self._require_init()
        return self._round(previous_random, current_bit)

    def sumcheck_finalize(
        self, previous_random: Operand
    ) -> tuple[FieldElement, FieldElement]:
        """Return the claimed values of the layer below at ``r_u`` and ``r_v``."""
        self._require_init()
        if not self._v_mult_add:
            raise RuntimeError("the sum-check has not run")
        self.v_v = self._v_mult_add[0].eval(previous_random)
        return self.v_u, self.v_v