# ===--------------------------------------------------------------------------------------===#
#
# Part of the TDVNS Project, under the Apache License v2.0.
# See https://www.apache.org/licenses/LICENSE-2.0 for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements the triangle-degree evaluator and the objective function.
#
# ===--------------------------------------------------------------------------------------===#

from dataclasses import dataclass

import numpy as np


@dataclass
class Evaluation:
    """Triangle-degree statistics of a graph.

    Attributes:
        td: Number of triangles through each vertex, in vertex order.
        neqtd: Number of unordered vertex pairs with equal triangle-degree.
        value: Objective value; lower means a more spread out triangle-degree sequence.
    """

    td: np.ndarray
    neqtd: int
    value: float


def triangle_degrees(adj: np.ndarray) -> np.ndarray:
    """Counts the triangles through every vertex of a graph.

    The triangle-degree of vertex i is half the diagonal entry (A^3)_ii, as every
    triangle through i is a closed walk of length 3 traversed in both directions.
    Only the diagonal is accumulated: (A^3)_ii = sum_j (A^2)_ij * A_ji, and A is
    symmetric.

    Args:
        adj: Symmetric 0/1 integer adjacency matrix.

    Returns:
        Integer array with the triangle-degree of each vertex.
    """
    adj = np.asarray(adj, dtype=np.int64)
    closed_walks: np.ndarray = ((adj @ adj) * adj).sum(axis=1)
    return closed_walks // 2


def count_collisions(td: np.ndarray) -> int:
    """Counts the unordered vertex pairs (i, j), i < j, with td[i] == td[j]."""
    _, counts = np.unique(td, return_counts=True)
    return int((counts * (counts - 1) // 2).sum())


def objective_value(td: np.ndarray) -> float:
    """Computes the objective that favors pairwise distinct triangle-degrees.

    The sequence is sorted and every gap between consecutive entries contributes
    1 / (gap + 1/n), so equal neighbors cost n and large gaps cost little.
    """
    n: int = len(td)
    if n < 2:
        return 0.0
    gaps: np.ndarray = np.diff(np.sort(td)).astype(np.float64)
    return float(np.sum(1.0 / (gaps + 1.0 / n)))


class TriangleDegreeEvaluator:
    """Evaluates graphs without touching any shared state.

    It is safe to call on hypothetical graphs that are never installed as the
    current solution.
    """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"

    def evaluate(self, adj: np.ndarray) -> Evaluation:
        td: np.ndarray = triangle_degrees(adj)
        return Evaluation(td=td, neqtd=count_collisions(td), value=objective_value(td))

    def value(self, adj: np.ndarray) -> float:
        """Computes only the objective value of a graph."""
        return objective_value(triangle_degrees(adj))
