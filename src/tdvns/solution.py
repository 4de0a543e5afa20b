# ===--------------------------------------------------------------------------------------===#
#
# Part of the TDVNS Project, under the Apache License v2.0.
# See https://www.apache.org/licenses/LICENSE-2.0 for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements the solution class holding a regular graph and its triangle-degrees.
#
# ===--------------------------------------------------------------------------------------===#

from typing import Optional

from dataclasses import dataclass, field

import numpy as np

from tdvns.evaluator import Evaluation, TriangleDegreeEvaluator
from tdvns.graph import ADJ_DTYPE, SwitchCandidate, apply_switch, is_regular

_EVALUATOR: TriangleDegreeEvaluator = TriangleDegreeEvaluator()


@dataclass(eq=False)
class Solution:
    """A d-regular graph together with its triangle-degree statistics.

    The derived fields are computed on construction and are always consistent
    with the adjacency matrix: every method that changes the graph refreshes
    them before returning.

    Attributes:
        n: Number of vertices.
        d: Common vertex degree.
        adj: Adjacency matrix owned by this solution.
        td: Triangle-degree of each vertex, in vertex order.
        neqtd: Number of vertex pairs with equal triangle-degrees.
        value: Objective value that favors distinct triangle-degrees.
    """

    n: int
    d: int
    adj: np.ndarray
    td: np.ndarray = field(init=False, repr=False)
    neqtd: int = field(init=False)
    value: float = field(init=False)

    def __post_init__(self) -> None:
        self.refresh()

    @classmethod
    def from_graph(cls, adj: np.ndarray, d: Optional[int] = None) -> "Solution":
        """Creates a solution from an adjacency matrix.

        The matrix is copied, so the solution never aliases the caller's array.

        Args:
            adj: Adjacency matrix of a regular graph.
            d: Expected common degree. If None, it is read from the first row.

        Returns:
            A solution with refreshed triangle-degree statistics.

        Raises:
            ValueError: If the matrix is not the adjacency matrix of a simple
                d-regular graph.
        """
        adj = np.array(adj, dtype=ADJ_DTYPE)
        if adj.ndim != 2:
            raise ValueError(f"Adjacency matrix must be two-dimensional, got shape {adj.shape}.")
        if d is None:
            d = int(adj[0].sum()) if len(adj) else 0
        if not is_regular(adj, d):
            raise ValueError(f"Adjacency matrix is not a simple {d}-regular graph.")

        return cls(n=adj.shape[0], d=d, adj=adj)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}"
            "("
            f"n={self.n},"
            f"d={self.d},"
            f"neqtd={self.neqtd},"
            f"value={self.value:.8f}"
            ")"
        )

    def refresh(self) -> Evaluation:
        """Recomputes the triangle-degrees, collision count and objective value."""
        evaluation: Evaluation = _EVALUATOR.evaluate(self.adj)
        self.td = evaluation.td
        self.neqtd = evaluation.neqtd
        self.value = evaluation.value
        return evaluation

    def switch(self, cand: SwitchCandidate) -> None:
        """Applies a 2-switch to the graph and refreshes the derived fields."""
        apply_switch(self.adj, cand)
        self.refresh()

    def copy(self) -> "Solution":
        """Returns a deep copy that shares no arrays with this solution."""
        return Solution(n=self.n, d=self.d, adj=self.adj.copy())

    def is_valid(self) -> bool:
        return is_regular(self.adj, self.d)

    def report(self) -> str:
        """Formats the basic information about the solution."""
        return (
            f"The value of the objective function: {self.value}\n"
            f"Number of vertex pairs with equal triangle degrees: {self.neqtd}"
        )

    def report_full(self) -> str:
        """Formats the adjacency matrix, the triangle-degrees and the basic information."""
        rows: str = "\n".join(" ".join(str(x) for x in row) for row in self.adj.tolist())
        td: str = " ".join(str(x) for x in self.td.tolist())
        return f"Adjacency matrix A:\n{rows}\nTriangle degrees:\n{td}\n{self.report()}"
