# ===--------------------------------------------------------------------------------------===#
#
# Part of the TDVNS Project, under the Apache License v2.0.
# See https://www.apache.org/licenses/LICENSE-2.0 for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#

"""Unit tests for the solution class."""

import numpy as np
import pytest

from tdvns.descent import SteepestDescent
from tdvns.evaluator import TriangleDegreeEvaluator
from tdvns.graph import RegularGraphGenerator, iter_switches
from tdvns.solution import Solution


def test_from_graph_copies_and_refreshes():
    adj = RegularGraphGenerator(seed=0).generate(8, 3)
    sol = Solution.from_graph(adj)

    assert sol.n == 8
    assert sol.d == 3
    assert sol.adj is not adj
    assert len(sol.td) == 8
    assert sol.value > 0

    adj[0, :] = 0
    assert sol.is_valid()


def test_from_graph_rejects_irregular_matrix():
    adj = np.zeros((4, 4), dtype=np.int64)
    adj[0, 1] = adj[1, 0] = 1

    with pytest.raises(ValueError, match="regular"):
        Solution.from_graph(adj)
    with pytest.raises(ValueError):
        Solution.from_graph(np.zeros(4))


def test_copy_shares_no_arrays():
    sol = Solution.from_graph(RegularGraphGenerator(seed=1).generate(10, 4))
    clone = sol.copy()

    sol.switch(next(iter_switches(sol.adj)))

    assert not np.array_equal(sol.adj, clone.adj)
    assert clone.is_valid()
    assert clone.td is not sol.td


def test_report_full():
    adj = np.ones((4, 4), dtype=np.int64) - np.eye(4, dtype=np.int64)
    report = Solution.from_graph(adj).report_full()

    assert report.splitlines()[:2] == ["Adjacency matrix A:", "0 1 1 1"]
    assert "Triangle degrees:\n3 3 3 3" in report
    assert "Number of vertex pairs with equal triangle degrees: 6" in report


def test_direct_construction_computes_derived_fields():
    adj = RegularGraphGenerator(seed=0).generate(10, 4)
    sol = Solution(n=10, d=4, adj=adj)
    expected = TriangleDegreeEvaluator().evaluate(adj)

    assert sol.td.tolist() == expected.td.tolist()
    assert sol.neqtd == expected.neqtd
    assert sol.value == pytest.approx(expected.value)

    clone = sol.copy()
    assert clone.neqtd == sol.neqtd
    assert clone.td.tolist() == sol.td.tolist()


def test_direct_construction_can_be_descended():
    sol = Solution(n=10, d=4, adj=RegularGraphGenerator(seed=0).generate(10, 4))
    initial_value = sol.value

    descent = SteepestDescent()
    descent.descend(sol)

    assert initial_value > 0
    assert sol.value <= initial_value
    assert sol.value == pytest.approx(TriangleDegreeEvaluator().evaluate(sol.adj).value)
    best = descent.best_switch(sol)
    assert best is None or best[1] >= sol.value - descent.tolerance
