# ===--------------------------------------------------------------------------------------===#
#
# Part of the TDVNS Project, under the Apache License v2.0.
# See https://www.apache.org/licenses/LICENSE-2.0 for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements tests for triangle-degree evaluation.
#
# ===--------------------------------------------------------------------------------------===#

from itertools import combinations

import numpy as np
import pytest

from tdvns.evaluator import (
    TriangleDegreeEvaluator,
    count_collisions,
    objective_value,
    triangle_degrees,
)
from tdvns.graph import RegularGraphGenerator


def _graph(n, edges):
    adj = np.zeros((n, n), dtype=np.int64)
    for u, v in edges:
        adj[u, v] = adj[v, u] = 1
    return adj


def _brute_force_triangles(adj):
    n = adj.shape[0]
    td = [0] * n
    for i, j, k in combinations(range(n), 3):
        if adj[i, j] and adj[j, k] and adj[i, k]:
            td[i] += 1
            td[j] += 1
            td[k] += 1
    return td


@pytest.mark.parametrize("n", [1, 2, 5, 9])
def test_empty_graph(n):
    evaluation = TriangleDegreeEvaluator().evaluate(np.zeros((n, n), dtype=np.int64))

    assert evaluation.td.tolist() == [0] * n
    assert evaluation.neqtd == n * (n - 1) // 2


@pytest.mark.parametrize("n", [3, 4, 6, 8])
def test_complete_graph(n):
    adj = np.ones((n, n), dtype=np.int64) - np.eye(n, dtype=np.int64)
    evaluation = TriangleDegreeEvaluator().evaluate(adj)

    assert evaluation.td.tolist() == [(n - 1) * (n - 2) // 2] * n
    assert evaluation.neqtd == n * (n - 1) // 2
    assert evaluation.value == pytest.approx((n - 1) * n)


def test_paw_graph():
    # triangle 0-1-2 with pendant vertex 3 attached to 2
    evaluation = TriangleDegreeEvaluator().evaluate(_graph(4, [(0, 1), (1, 2), (0, 2), (2, 3)]))

    assert evaluation.td.tolist() == [1, 1, 1, 0]
    assert evaluation.neqtd == 3
    assert evaluation.value == pytest.approx(1 / 1.25 + 4 + 4)


def test_diamond_graph():
    evaluation = TriangleDegreeEvaluator().evaluate(
        _graph(4, [(0, 1), (0, 2), (1, 2), (1, 3), (2, 3)])
    )

    assert evaluation.td.tolist() == [1, 2, 2, 1]
    assert evaluation.neqtd == 2
    assert evaluation.value == pytest.approx(4 + 0.8 + 4)


@pytest.mark.parametrize("seed", range(4))
def test_triangle_degrees_match_brute_force(seed):
    adj = RegularGraphGenerator(seed=seed).generate(12, 6)
    td = triangle_degrees(adj)

    assert td.dtype.kind == "i"
    assert td.tolist() == _brute_force_triangles(adj)


def test_count_collisions():
    assert count_collisions(np.array([3, 1, 3, 2, 3, 1])) == 4
    assert count_collisions(np.array([0, 1, 2, 3])) == 0
    assert count_collisions(np.array([], dtype=np.int64)) == 0


def test_objective_value_is_order_independent():
    td = np.array([5, 0, 2, 2, 9])
    expected = 1 / (2 + 0.2) + 1 / 0.2 + 1 / (3 + 0.2) + 1 / (4 + 0.2)

    assert objective_value(td) == pytest.approx(expected)
    assert objective_value(td[::-1]) == pytest.approx(expected)


def test_objective_value_prefers_spread_sequences():
    assert objective_value(np.array([0, 1, 2, 3])) < objective_value(np.array([0, 1, 1, 3]))
    assert objective_value(np.array([0, 2, 4, 6])) < objective_value(np.array([0, 1, 2, 3]))


def test_objective_value_of_single_vertex():
    assert objective_value(np.array([4])) == 0.0


def test_evaluate_does_not_mutate_input():
    adj = RegularGraphGenerator(seed=1).generate(8, 3)
    snapshot = adj.copy()

    evaluator = TriangleDegreeEvaluator()
    first = evaluator.evaluate(adj)
    second = evaluator.evaluate(adj)

    assert np.array_equal(adj, snapshot)
    assert first is not second
    assert first.td.tolist() == second.td.tolist()
    assert evaluator.value(adj) == first.value
