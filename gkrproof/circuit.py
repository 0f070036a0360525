"""Layered arithmetic circuits and their evaluation."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import IntEnum

from gkrproof.field import ONE, ZERO, FieldElement, Operand

#: Widest bit window an exponent-sum gate may combine.
MAX_EXP_SUM_WIDTH = 60


class GateType(IntEnum):
    """Kinds of gate; the numeric values are part of the circuit format."""

    ADD = 0
    MULT = 1
    DUMMY = 2
    INPUT = 3
    DIRECT_RELAY = 4
    SUM = 5
    NOT = 6
    MINUS = 7
    XOR = 8
    NAAB = 9
    RELAY = 10
    EXP_SUM = 12
    BIT_TEST = 13
    CUSTOM_COMB = 14


@dataclass(frozen=True)
class Gate:
    """One gate reading wires ``u`` and ``v`` of the layer below.

    Custom combination gates instead read the wires in ``src``, each scaled
    by the matching entry of ``weight``.
    """

    ty: GateType
    u: int = 0
    v: int = 0
    src: tuple[int, ...] = ()
    weight: tuple[FieldElement, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "ty", GateType(self.ty))
        object.__setattr__(self, "src", tuple(self.src))
        object.__setattr__(self, "weight", tuple(ZERO + w for w in self.weight))
        if len(self.src) != len(self.weight):
            raise ValueError("src and weight must have the same length")

    @property
    def parameter_length(self) -> int:
        return len(self.src)


@dataclass(frozen=True)
class Layer:
    """A layer of ``2 ** bit_length`` gates."""

    bit_length: int
    gates: tuple[Gate, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.bit_length < 0:
            raise ValueError("bit_length must be non-negative")
        gates = tuple(self.gates)
        if len(gates) != 1 << self.bit_length:
            raise ValueError(
                f"layer of bit length {self.bit_length} needs {1 << self.bit_length} "
                f"gates, got {len(gates)}"
            )
        object.__setattr__(self, "gates", gates)

    @property
    def size(self) -> int:
        return 1 << self.bit_length


@dataclass(frozen=True)
class LayeredCircuit:
    """Layers from the input layer (index 0) up to the output layer."""

    layers: tuple[Layer, ...]

    def __post_init__(self) -> None:
        layers = tuple(self.layers)
        if not layers:
            raise ValueError("a circuit needs at least one layer")
        object.__setattr__(self, "layers", layers)

    @property
    def total_depth(self) -> int:
        return len(self.layers)

    def __getitem__(self, index: int) -> Layer:
        return self.layers[index]


def from_string(text: str) -> FieldElement:
    """Parse a decimal integer into a field element."""
    result = ZERO
    for ch in text:
        if not "0" <= ch <= "9":
            raise ValueError(f"not a decimal digit: {ch!r}")
        result = result * 10 + (ord(ch) - ord("0"))
    return result


def _wire(values: Sequence[FieldElement], index: int) -> FieldElement:
    if not 0 <= index < len(values):
        raise ValueError(f"wire {index} out of range for layer of {len(values)}")
    return values[index]


def _evaluate_gate(gate: Gate, below: Sequence[FieldElement]) -> FieldElement:
    ty, u, v = gate.ty, gate.u, gate.v
    if ty is GateType.ADD:
        return _wire(below, u) + _wire(below, v)
    if ty is GateType.MULT:
        return _wire(below, u) * _wire(below, v)
    if ty is GateType.DUMMY:
        return ZERO
    if ty is GateType.INPUT:
        return FieldElement(u)
    if ty in (GateType.DIRECT_RELAY, GateType.RELAY):
        return _wire(below, u)
    if ty is GateType.SUM:
        return sum((_wire(below, k) for k in range(u, v)), ZERO)
    if ty is GateType.NOT:
        return ONE - _wire(below, u)
    if ty is GateType.MINUS:
        return _wire(below, u) - _wire(below, v)
    if ty is GateType.XOR:
        x, y = _wire(below, u), _wire(below, v)
        return x + y - 2 * x * y
    if ty is GateType.NAAB:
        x, y = _wire(below, u), _wire(below, v)
        return y - x * y
    if ty is GateType.EXP_SUM:
        if v - u + 1 > MAX_EXP_SUM_WIDTH:
            raise ValueError(
                f"exponent sum spans more than {MAX_EXP_SUM_WIDTH} wires"
            )
        return sum(
            (_wire(below, k) * (1 << (k - u)) for k in range(u, v + 1)), ZERO
        )
    if ty is GateType.BIT_TEST:
        if u != v:
            raise ValueError("bit-test gate must read the same wire twice")
        x = _wire(below, u)
        return x * (ONE - x)
    if ty is GateType.CUSTOM_COMB:
        return sum(
            (_wire(below, s) * w for s, w in zip(gate.src, gate.weight)), ZERO
        )
    raise ValueError(f"unknown gate type {ty!r}")


def evaluate_circuit(
    circuit: LayeredCircuit, inputs: Iterable[Operand]
) -> list[list[FieldElement]]:
    """Evaluate every layer; the input layer is padded with zeros.

    Returns the values of all layers, the input layer first.
    """
    input_layer = circuit.layers[0]
    for gate in input_layer.gates:
        if gate.ty not in (GateType.INPUT, GateType.DUMMY):
            raise ValueError("the input layer may hold only input and dummy gates")
    first = [ZERO + x for x in inputs]
    if len(first) > input_layer.size:
        raise ValueError(
            f"{len(first)} inputs do not fit a layer of {input_layer.size} wires"
        )
    first.extend([ZERO] * (input_layer.size - len(first)))

    values = [first]
    for layer in circuit.layers[1:]:
        below = values[-1]
        values.append([_evaluate_gate(gate, below) for gate in layer.gates])
    return values


def v_res(
    one_minus_r_0: Sequence[Operand],
    r_0: Sequence[Operand],
    output: Sequence[Operand],
) -> FieldElement:
    """Evaluate the multilinear extension of ``output`` at the point ``r_0``."""
    if len(one_minus_r_0) != len(r_0):
        raise ValueError("one_minus_r_0 and r_0 must have the same length")
    values = [ZERO + x for x in output]
    for low, high in zip(one_minus_r_0, r_0):
        values = [
            values[2 * j] * low + values[2 * j + 1] * high
            for j in range(len(values) // 2)
        ]
    if not values:
        raise ValueError("output is too short for the number of variables")
    return values[0]