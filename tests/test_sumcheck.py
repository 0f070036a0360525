import random
from dataclasses import dataclass

import pytest

from gkrproof.circuit import (
    Gate,
    GateType,
    Layer,
    LayeredCircuit,
    evaluate_circuit,
    v_res,
)
from gkrproof.field import ONE, ZERO, FieldElement, random_element
from gkrproof.sumcheck import ZKProver


def _input_layer(bit_length):
    return Layer(bit_length, tuple(Gate(GateType.INPUT) for _ in range(1 << bit_length)))


def _add_mult_circuit():
    layer1 = Layer(
        2,
        (
            Gate(GateType.ADD, 0, 1),
            Gate(GateType.MULT, 2, 3),
            Gate(GateType.MULT, 1, 2),
            Gate(GateType.ADD, 3, 0),
        ),
    )
    return LayeredCircuit((_input_layer(2), layer1))


def _mixed_circuit():
    layer1 = Layer(
        3,
        (
            Gate(GateType.XOR, 0, 1),
            Gate(GateType.NOT, 2, 0),
            Gate(GateType.MINUS, 3, 1),
            Gate(GateType.NAAB, 1, 2),
            Gate(GateType.BIT_TEST, 3, 3),
            Gate(GateType.SUM, 0, 3),
            Gate(GateType.EXP_SUM, 0, 2),
            Gate(GateType.CUSTOM_COMB, src=(0, 2), weight=(3, 5)),
        ),
    )
    layer2 = Layer(
        2,
        (
            Gate(GateType.RELAY, 4, 0),
            Gate(GateType.ADD, 5, 6),
            Gate(GateType.MULT, 7, 1),
            Gate(GateType.DUMMY),
        ),
    )
    return LayeredCircuit((_input_layer(2), layer1, layer2))


def _eq(index, point):
    result = ONE
    for bit, r in enumerate(point):
        result = result * (r if (index >> bit) & 1 else ONE - r)
    return result


@dataclass
class Transcript:
    consistent: list
    initial_claim: FieldElement
    final_claim: FieldElement
    r_0: list
    r_1: list
    alpha: FieldElement
    beta: FieldElement
    r_u: list
    r_v: list
    v_u: FieldElement
    v_v: FieldElement


def _run(prover, layer_id, seed):
    rng = random.Random(seed)
    lg = prover.circuit[layer_id].bit_length
    lu = prover.circuit[layer_id - 1].bit_length
    r_0 = [random_element(rng) for _ in range(lg)]
    r_1 = [random_element(rng) for _ in range(lg)]
    alpha, beta = random_element(rng), random_element(rng)
    out = prover.circuit_value[layer_id]
    claim = alpha * v_res([ONE - x for x in r_0], r_0, out) + beta * v_res(
        [ONE - x for x in r_1], r_1, out
    )
    initial = claim
    prover.sumcheck_init(
        layer_id, lg, lu, lu, alpha, beta, r_0, r_1,
        [ONE - x for x in r_0], [ONE - x for x in r_1],
    )
    prover.sumcheck_phase1_init()
    consistent = []
    previous = ZERO
    r_u = []
    for bit in range(lu):
        poly = prover.sumcheck_phase1_update(previous, bit)
        consistent.append(poly.eval(0) + poly.eval(1) == claim)
        previous = random_element(rng)
        r_u.append(previous)
        claim = poly.eval(previous)
    prover.sumcheck_phase2_init(previous, r_u, [ONE - x for x in r_u])
    r_v = []
    for bit in range(lu):
        poly = prover.sumcheck_phase2_update(previous, bit)
        consistent.append(poly.eval(0) + poly.eval(1) == claim)
        previous = random_element(rng)
        r_v.append(previous)
        claim = poly.eval(previous)
    v_u, v_v = prover.sumcheck_finalize(previous)
    return Transcript(consistent, initial, claim, r_0, r_1, alpha, beta, r_u, r_v, v_u, v_v)


def _prover(circuit, inputs):
    prover = ZKProver(circuit)
    prover.get_witness(inputs)
    prover.evaluate()
    return prover


def test_evaluate_returns_output_layer():
    circuit = _add_mult_circuit()
    prover = ZKProver(circuit)
    prover.get_witness([2, 3, 4, 7])
    output = prover.evaluate()
    assert output == evaluate_circuit(circuit, [2, 3, 4, 7])[-1]
    assert output[0] == FieldElement(5)


def test_witness_is_padded_with_zeros():
    prover = ZKProver(_add_mult_circuit())
    prover.get_witness([9])
    prover.evaluate()
    assert prover.circuit_value[0] == [FieldElement(9), ZERO, ZERO, ZERO]


def test_too_many_inputs_rejected():
    prover = ZKProver(_add_mult_circuit())
    with pytest.raises(ValueError):
        prover.get_witness([1, 2, 3, 4, 5])


def test_evaluate_without_witness_fails():
    with pytest.raises(RuntimeError):
        ZKProver(_add_mult_circuit()).evaluate()


def test_sumcheck_before_evaluation_fails():
    prover = ZKProver(_add_mult_circuit())
    with pytest.raises(RuntimeError):
        prover.sumcheck_init(1, 2, 2, 2, 1, 1, [0, 0], [0, 0], [1, 1], [1, 1])


def test_input_layer_cannot_be_checked():
    prover = _prover(_add_mult_circuit(), [1, 2, 3, 4])
    with pytest.raises(ValueError):
        prover.sumcheck_init(0, 2, 2, 2, 1, 1, [0, 0], [0, 0], [1, 1], [1, 1])


def test_update_before_init_fails():
    prover = _prover(_add_mult_circuit(), [1, 2, 3, 4])
    with pytest.raises(RuntimeError):
        prover.sumcheck_phase1_update(ZERO, 0)


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_add_mult_rounds_are_consistent(seed):
    prover = _prover(_add_mult_circuit(), [5, 11, 13, 17])
    transcript = _run(prover, 1, seed)
    assert transcript.consistent and all(transcript.consistent)


@pytest.mark.parametrize("seed", [4, 5])
def test_add_mult_final_claim_matches_wiring(seed):
    circuit = _add_mult_circuit()
    prover = _prover(circuit, [5, 11, 13, 17])
    t = _run(prover, 1, seed)
    expected = ZERO
    for g, gate in enumerate(circuit[1].gates):
        w = t.alpha * _eq(g, t.r_0) + t.beta * _eq(g, t.r_1)
        w = w * _eq(gate.u, t.r_u) * _eq(gate.v, t.r_v)
        if gate.ty is GateType.ADD:
            expected = expected + w * (t.v_u + t.v_v)
        else:
            expected = expected + w * (t.v_u * t.v_v)
    assert t.final_claim == expected


def test_finalize_reports_values_of_layer_below():
    prover = _prover(_add_mult_circuit(), [5, 11, 13, 17])
    t = _run(prover, 1, 7)
    below = prover.circuit_value[0]
    assert t.v_u == v_res([ONE - x for x in t.r_u], t.r_u, below)
    assert t.v_v == v_res([ONE - x for x in t.r_v], t.r_v, below)


@pytest.mark.parametrize("layer_id", [1, 2])
def test_mixed_gate_rounds_are_consistent(layer_id):
    prover = _prover(_mixed_circuit(), [0, 1, 1, 0])
    transcript = _run(prover, layer_id, 10 + layer_id)
    assert len(transcript.consistent) == 2 * prover.circuit[layer_id - 1].bit_length
    assert all(transcript.consistent)


def test_mixed_gates_with_field_inputs():
    prover = _prover(_mixed_circuit(), [3, 8, 21, 34])
    transcript = _run(prover, 1, 99)
    assert transcript.consistent == [True] * (2 * prover.circuit[0].bit_length)
    below = prover.circuit_value[0]
    assert transcript.v_u == v_res([ONE - x for x in transcript.r_u], transcript.r_u, below)
    assert transcript.v_v == v_res([ONE - x for x in transcript.r_v], transcript.r_v, below)


def test_no_rounds_left_raises():
    prover = _prover(_add_mult_circuit(), [1, 2, 3, 4])
    _run(prover, 1, 0)
    with pytest.raises(RuntimeError):
        prover.sumcheck_phase2_update(ZERO, 1)


def test_phase2_before_phase1_fails():
    prover = _prover(_add_mult_circuit(), [1, 2, 3, 4])
    prover.sumcheck_init(1, 2, 2, 2, 1, 1, [0, 0], [0, 0], [1, 1], [1, 1])
    with pytest.raises(RuntimeError):
        prover.sumcheck_phase2_init(ZERO, [0, 0], [1, 1])


def test_unsupported_gate_warns():
    layer1 = Layer(1, (Gate(GateType.INPUT, 7), Gate(GateType.ADD, 0, 1)))
    circuit = LayeredCircuit((_input_layer(1), layer1))
    prover = _prover(circuit, [2, 3])
    prover.sumcheck_init(1, 1, 1, 1, 1, 1, [0], [0], [1], [1])
    with pytest.warns(RuntimeWarning, match="unsupported"):
        prover.sumcheck_phase1_init()


def test_short_randomness_rejected():
    prover = _prover(_add_mult_circuit(), [1, 2, 3, 4])
    prover.sumcheck_init(1, 2, 2, 2, 1, 1, [0], [0], [1], [1])
    with pytest.raises(ValueError):
        prover.sumcheck_phase1_init()