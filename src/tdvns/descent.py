# ===--------------------------------------------------------------------------------------===#
#
# Part of the TDVNS Project, under the Apache License v2.0.
# See https://www.apache.org/licenses/LICENSE-2.0 for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements the steepest descent over degree-preserving edge switches.
#
# ===--------------------------------------------------------------------------------------===#

from typing import Optional, Tuple

import logging

import numpy as np

from tdvns.evaluator import TriangleDegreeEvaluator
from tdvns.graph import SwitchCandidate, apply_switch, iter_switches
from tdvns.solution import Solution

DEFAULT_TOLERANCE: float = 1e-6


class SteepestDescent:
    """Explores the 2-switch neighborhood and always moves to its best neighbor.

    Candidate switches are scored on a scratch copy of the graph that is reused
    for the whole scan: the four cells of a switch are flipped, the copy is
    evaluated and the switch is undone again. The live solution is only touched
    when the best candidate is committed.
    """

    def __init__(
        self,
        tolerance: float = DEFAULT_TOLERANCE,
        evaluator: Optional[TriangleDegreeEvaluator] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initializes the steepest descent.

        Args:
            tolerance: Minimum decrease of the objective value for a switch to count
                as an improvement.
            evaluator: Evaluator used to score hypothetical graphs.
            logger: Logger instance for logging descent steps.
        """
        self.tolerance: float = tolerance
        self.evaluator: TriangleDegreeEvaluator = (
            evaluator if evaluator is not None else TriangleDegreeEvaluator()
        )
        self.logger: logging.Logger = logger if logger is not None else logging.getLogger(__name__)
        self.num_steps: int = 0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(tolerance={self.tolerance})"

    def best_switch(self, sol: Solution) -> Optional[Tuple[SwitchCandidate, float]]:
        """Finds the neighbor of a solution with the lowest objective value.

        Ties are resolved in favor of the first candidate in enumeration order.

        Args:
            sol: Solution whose neighborhood is scanned. It is not modified.

        Returns:
            The best switch and the objective value it would produce, or None if the
            graph admits no legal switch.
        """
        scratch: np.ndarray = sol.adj.copy()
        best: Optional[Tuple[SwitchCandidate, float]] = None

        for cand in iter_switches(sol.adj):
            apply_switch(scratch, cand)
            value: float = self.evaluator.value(scratch)
            apply_switch(scratch, cand.inverse())

            if best is None or value < best[1]:
                best = (cand, value)

        return best

    def step(self, sol: Solution) -> bool:
        """Commits the best switch if it improves the objective value.

        Returns:
            True if a switch was committed, False at a local optimum.
        """
        best: Optional[Tuple[SwitchCandidate, float]] = self.best_switch(sol)
        if best is None or not best[1] < sol.value - self.tolerance:
            return False

        cand: SwitchCandidate = best[0]
        sol.switch(cand)
        self.num_steps += 1
        self.logger.debug(f"Switch {tuple(cand)}: value={sol.value:.8f}, neqtd={sol.neqtd}.")
        return True

    def descend(self, sol: Solution) -> Solution:
        """Runs steepest descent on a solution in place until a local optimum is reached.

        Args:
            sol: Solution to improve.

        Returns:
            The same solution object, now locally optimal under the 2-switch
            neighborhood.
        """
        while self.step(sol):
            pass
        return sol
