# ===--------------------------------------------------------------------------------------===#
#
# Part of the TDVNS Project, under the Apache License v2.0.
# See https://www.apache.org/licenses/LICENSE-2.0 for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements the shaking step that applies random edge switches.
#
# ===--------------------------------------------------------------------------------------===#

from typing import List, Optional

import logging
import random

import numpy as np

from tdvns.errors import DeadlockError
from tdvns.graph import SwitchCandidate, iter_switches, switch_partners
from tdvns.solution import Solution

DEFAULT_MAX_RANDOM_TRIALS: int = 10


class ShakeDiversifier:
    """Perturbs a solution with random degree-preserving 2-switches.

    Each switch is first sampled cheaply by drawing the pivot vertices u and v at
    random. If that keeps failing, every legal switch of the graph is enumerated
    and one is drawn uniformly.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        random_state: Optional[random.Random] = None,
        max_random_trials: int = DEFAULT_MAX_RANDOM_TRIALS,
        logger: Optional[logging.Logger] = None,
    ):
        """Initializes the shaker.

        Args:
            seed: Random seed for reproducible shakes. Ignored if random_state is given.
            random_state: Random number generator used to select switches.
            max_random_trials: Number of random pivot draws before falling back to
                full enumeration.
            logger: Logger instance for logging shake activities.
        """
        self.seed: Optional[int] = seed
        if random_state is not None:
            self.random_state: random.Random = random_state
        else:
            self.random_state = random.Random()
            if self.seed is not None:
                self.random_state.seed(self.seed)
        self.max_random_trials: int = max_random_trials
        self.logger: logging.Logger = logger if logger is not None else logging.getLogger(__name__)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}"
            "("
            f"seed={self.seed},"
            f"max_random_trials={self.max_random_trials}"
            ")"
        )

    def sample_switch(self, adj: np.ndarray) -> Optional[SwitchCandidate]:
        """Tries to draw a legal switch from random pivot vertices.

        Returns:
            A legal switch, or None if all random trials failed.
        """
        n: int = adj.shape[0]
        if n < 2:
            return None

        for _ in range(self.max_random_trials):
            u: int = self.random_state.randrange(n)
            v: int = self.random_state.randrange(n)
            if u == v:
                continue

            s_cands, t_cands = switch_partners(adj, u, v)
            if not len(s_cands) or not len(t_cands):
                continue

            s: int = int(s_cands[self.random_state.randrange(len(s_cands))])
            t: int = int(t_cands[self.random_state.randrange(len(t_cands))])
            if s == t:
                continue

            return SwitchCandidate(u, v, s, t)

        return None

    def random_switch(self, adj: np.ndarray) -> SwitchCandidate:
        """Draws a random legal switch of a graph.

        Raises:
            DeadlockError: If the graph admits no legal switch at all.
        """
        cand: Optional[SwitchCandidate] = self.sample_switch(adj)
        if cand is not None:
            return cand

        all_cands: List[SwitchCandidate] = list(iter_switches(adj))
        if not all_cands:
            raise DeadlockError("The graph admits no legal edge switch.")
        self.logger.debug(f"Random trials failed, drew from {len(all_cands)} enumerated switches.")
        return all_cands[self.random_state.randrange(len(all_cands))]

    def shake(self, sol: Solution, k: int) -> Solution:
        """Applies k random switches to a solution in place.

        Args:
            sol: Solution to perturb.
            k: Number of switches to apply.

        Returns:
            The same solution object.

        Raises:
            DeadlockError: If a switch cannot be found. The remaining switches are
                not applied and the solution should be discarded.
        """
        for _ in range(k):
            sol.switch(self.random_switch(sol.adj))
        return sol
