import itertools

import numpy as np
import pytest

from codes import (
    HammingCode,
    InvalidParameter,
    LinearBlockCode,
    SizeMismatch,
    build_parity_check_matrix,
    compute_syndrome,
    hamming_encode,
    hamming_parameters,
    information_positions,
    is_power_of_two,
    parity_positions,
)


@pytest.mark.parametrize("m, n, k", [(1, 1, 0), (2, 3, 1), (3, 7, 4), (4, 15, 11), (5, 31, 26)])
def test_parameters(m, n, k):
    assert hamming_parameters(m) == (n, k)


@pytest.mark.parametrize("m", [0, -1, -7, 2.5, "3", None, True])
def test_invalid_m_rejected(m):
    with pytest.raises(InvalidParameter):
        hamming_parameters(m)
    with pytest.raises(InvalidParameter):
        build_parity_check_matrix(m)


def test_positions():
    assert [p for p in range(1, 17) if is_power_of_two(p)] == [1, 2, 4, 8, 16]
    assert not is_power_of_two(0)
    assert parity_positions(7).tolist() == [0, 1, 3]
    assert information_positions(7).tolist() == [2, 4, 5, 6]
    assert len(information_positions(15)) == 11


@pytest.mark.parametrize("m", [2, 3, 4, 5, 6])
def test_matrix_columns_are_binary_positions(m):
    H = build_parity_check_matrix(m)
    n = (1 << m) - 1
    assert H.shape == (m, n)
    assert set(np.unique(H).tolist()) <= {0, 1}
    for j in range(n):
        value = sum(int(H[i, j]) << i for i in range(m))
        assert value == j + 1
    columns = {tuple(H[:, j]) for j in range(n)}
    assert len(columns) == n
    assert (0,) * m not in columns


def test_matrix_m3_rows():
    H = build_parity_check_matrix(3)
    assert H.tolist() == [
        [1, 0, 1, 0, 1, 0, 1],
        [0, 1, 1, 0, 0, 1, 1],
        [0, 0, 0, 1, 1, 1, 1],
    ]


def test_matrix_is_read_only():
    H = build_parity_check_matrix(3)
    with pytest.raises(ValueError):
        H[0, 0] = 0


def test_encode_m3_example():
    H = build_parity_check_matrix(3)
    c = hamming_encode([1, 0, 1, 1], H)
    assert c.tolist() == [0, 1, 1, 0, 0, 1, 1]
    # information bits sit at positions 3, 5, 6, 7
    assert c[[2, 4, 5, 6]].tolist() == [1, 0, 1, 1]
    assert not np.any(compute_syndrome(c, H))


def test_encode_all_messages_m3():
    H = build_parity_check_matrix(3)
    seen = set()
    for u in itertools.product((0, 1), repeat=4):
        c = hamming_encode(u, H)
        assert len(c) == 7
        assert not np.any(compute_syndrome(c, H))
        seen.add(tuple(c))
    assert len(seen) == 16


@pytest.mark.parametrize("m", [2, 4, 5, 6, 8])
def test_encode_random_messages_have_zero_syndrome(m):
    rng = np.random.default_rng(1000 + m)
    code = HammingCode(m)
    for _ in range(20):
        u = code.generate_message(rng)
        c = code.encode(u)
        assert code.is_codeword(c)
        assert np.array_equal(code.extract_info(c), u)


def test_encode_size_mismatch():
    H = build_parity_check_matrix(3)
    with pytest.raises(SizeMismatch):
        hamming_encode([1, 0, 1], H)
    with pytest.raises(SizeMismatch):
        hamming_encode([1, 0, 1, 1, 0], H)


def test_encode_rejects_non_bits():
    H = build_parity_check_matrix(3)
    with pytest.raises(ValueError):
        hamming_encode([1, 2, 0, 1], H)


@pytest.mark.parametrize("u", [[0.7, 1, 0, 1], [1, 0, 0, -1], [1, 0, 1.5, 0]])
def test_encode_rejects_fractional_and_negative_bits(u):
    H = build_parity_check_matrix(3)
    with pytest.raises(ValueError):
        hamming_encode(u, H)


def test_encode_accepts_float_and_bool_bits():
    H = build_parity_check_matrix(3)
    expected = [0, 1, 1, 0, 0, 1, 1]
    assert hamming_encode([1.0, 0.0, 1.0, 1.0], H).tolist() == expected
    assert hamming_encode([True, False, True, True], H).tolist() == expected


def test_syndrome_size_mismatch():
    H = build_parity_check_matrix(3)
    with pytest.raises(SizeMismatch):
        compute_syndrome([0, 1, 1], H)


def test_degenerate_m1():
    code = HammingCode(1)
    assert (code.n, code.k) == (1, 0)
    assert code.H.tolist() == [[1]]
    c = code.encode([])
    assert c.tolist() == [0]
    assert code.syndrome(c).tolist() == [0]
    assert code.syndrome([1]).tolist() == [1]
    assert code.extract_info(c).tolist() == []


def test_hamming_code_attributes():
    code = HammingCode(4)
    assert code.name == "Hamming(15,11)"
    assert (code.m, code.n, code.k) == (4, 15, 11)
    assert code.d_min == 3
    assert code.t == 1
    with pytest.raises(SizeMismatch):
        code.extract_info(np.zeros(14, dtype=int))


def test_linear_block_code_is_abstract():
    with pytest.raises(TypeError):
        LinearBlockCode(7, 4)

    class Incomplete(LinearBlockCode):
        def encode(self, u):
            return u

    with pytest.raises(TypeError):
        Incomplete(7, 4)
