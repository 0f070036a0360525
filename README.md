# gkrproof

Building blocks for GKR-style interactive proofs over GF(p^2), the quadratic
extension of the prime field with modulus p = 2^61 - 1. Elements are written
`real + img * i` with `i * i == -1`.

## Modules

- `gkrproof.field`: the frozen dataclass `FieldElement` with `+`, `-`, `*`,
  `/`, `**` and unary `-` (plain integers are accepted as operands),
  `fast_pow`, `inv` (raises `ZeroDivisionError` for zero),
  `get_root_of_unity(log_order)` for `0 <= log_order <= 61`, and
  `random_element` / `random_real_only`, which take an optional
  `random.Random` instance. `ZERO`, `ONE` and `MOD` are module constants.
- `gkrproof.polynomial`: `LinearPoly`, `QuadraticPoly`, `CubicPoly`,
  `QuadruplePoly` and `QuintuplePoly`, each with coefficient-wise addition and
  `eval`. A `LinearPoly` times a `LinearPoly` gives a `QuadraticPoly`, and a
  `QuadraticPoly` times a `LinearPoly` gives a `CubicPoly`.
- `gkrproof.utility`: `mylog(x)`, the exact base-2 logarithm of a power of
  two below 2^64; anything else raises `ValueError`.
- `gkrproof.fft`: `RSCodec(order)` precomputes twiddle factors for a size
  `order` and offers `fft` and `ifft` for power-of-two sizes that divide it
  (and are below 2^28). `ifft` warns and truncates when asked for more
  coefficients than there are evaluations.
- `gkrproof.merkle`: SHA-256 based `hash_pair`, `hash_single_field_element`,
  `hash_double_field_element_merkle_damgard` and `hash_value_pairs`;
  `create_tree` builds a heap-ordered tree (root at index 1, leaves padded to
  a power of two); `verify_claim` checks a leaf against a root and reports the
  proof bytes for siblings not seen before; `verify_merkle` checks an
  authentication path whose last entry is the leaf digest of a list of
  element pairs.
- `gkrproof.circuit`: `GateType`, `Gate`, `Layer` and `LayeredCircuit`, plus
  `evaluate_circuit` (values of every layer, input layer first), `v_res`
  (multilinear extension of an output vector at a point) and `from_string`
  (decimal text to a field element).
- `gkrproof.sumcheck`: `ZKProver`, which takes a witness, evaluates the
  circuit, and answers the rounds of both phases of the sum-check for one
  layer (`sumcheck_init`, `sumcheck_phase1_init`, `sumcheck_phase1_update`,
  `sumcheck_phase2_init`, `sumcheck_phase2_update`, `sumcheck_finalize`).

## Installation

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Example

Encode a polynomial with the Reed-Solomon FFT and recover its coefficients:

```python
import random

from gkrproof.field import get_root_of_unity, random_element
from gkrproof.fft import RSCodec

rng = random.Random(1)
n = 8
rate = 4
coefficients = [random_element(rng) for _ in range(n)]

codec = RSCodec(n * rate)
codeword = codec.fft(coefficients, n * rate, get_root_of_unity(5))
recovered = codec.ifft(codeword, n, n * rate, get_root_of_unity(5))
assert recovered == coefficients
```

The inverse transform reads every `rate`-th evaluation, which samples the
subgroup of order `n`.

Field arithmetic:

```python
from gkrproof.field import FieldElement, inv

two = FieldElement(2)
assert two * inv(two) == FieldElement(1)
assert two ** 3 == FieldElement(8)
```

## What the package does not do

- There is no command-line program; everything is used as a library.
- It holds no complete verifier: there is no low-degree test or polynomial
  commitment check beyond the Merkle path checks in `gkrproof.merkle`, and no
  verifier side of the sum-check. `ZKProver` only produces the prover's
  messages.
- Circuits are built in code from `Gate` and `Layer` objects; there is no
  reader for circuit files.