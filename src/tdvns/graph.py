# ===--------------------------------------------------------------------------------------===#
#
# Part of the TDVNS Project, under the Apache License v2.0.
# See https://www.apache.org/licenses/LICENSE-2.0 for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements random regular graph generation and degree-preserving edge switches.
#
# ===--------------------------------------------------------------------------------------===#

from typing import Iterator, List, NamedTuple, Optional, Tuple

import logging
import random

import numpy as np

from tdvns.errors import InvalidInstanceError

ADJ_DTYPE = np.int64


class SwitchCandidate(NamedTuple):
    """A 2-switch on four distinct vertices.

    Applying the switch deletes edges (u, s) and (v, t) and adds edges (v, s)
    and (u, t). Each of the four vertices loses one incident edge and gains
    one, so vertex degrees are preserved.

    Attributes:
        u: First pivot vertex, adjacent to s before the switch.
        v: Second pivot vertex, adjacent to t before the switch.
        s: Neighbor of u that is moved over to v.
        t: Neighbor of v that is moved over to u.
    """

    u: int
    v: int
    s: int
    t: int

    def inverse(self) -> "SwitchCandidate":
        """Returns the switch that undoes this one on the switched graph."""
        return SwitchCandidate(self.v, self.u, self.s, self.t)


def is_legal_switch(adj: np.ndarray, cand: SwitchCandidate) -> bool:
    """Checks whether a switch can be applied to the given adjacency matrix.

    Args:
        adj: Symmetric 0/1 adjacency matrix.
        cand: The switch to check.

    Returns:
        True if the four vertices are distinct, edges (u, s) and (v, t) exist and
        edges (v, s) and (u, t) do not.
    """
    u, v, s, t = cand
    if len({u, v, s, t}) != 4:
        return False
    return bool(adj[u, s] == 1 and adj[v, t] == 1 and adj[v, s] == 0 and adj[u, t] == 0)


def apply_switch(adj: np.ndarray, cand: SwitchCandidate) -> None:
    """Applies a switch to the adjacency matrix in place.

    Legality is not checked; callers obtain candidates from the enumeration
    helpers below or validate them with `is_legal_switch`.
    """
    u, v, s, t = cand
    adj[u, s] = adj[s, u] = 0
    adj[v, t] = adj[t, v] = 0
    adj[v, s] = adj[s, v] = 1
    adj[u, t] = adj[t, u] = 1


def switch_partners(adj: np.ndarray, u: int, v: int) -> Tuple[np.ndarray, np.ndarray]:
    """Finds the vertices s and t that can complete a switch for the pivots u and v.

    Args:
        adj: Symmetric 0/1 adjacency matrix.
        u: First pivot vertex.
        v: Second pivot vertex.

    Returns:
        Two ascending index arrays: the s-candidates (adjacent to u but not to v)
        and the t-candidates (adjacent to v but not to u), both excluding u and v.
    """
    row_u: np.ndarray = adj[u] == 1
    row_v: np.ndarray = adj[v] == 1

    s_mask: np.ndarray = row_u & ~row_v
    t_mask: np.ndarray = ~row_u & row_v
    for mask in (s_mask, t_mask):
        mask[u] = False
        mask[v] = False

    return np.flatnonzero(s_mask), np.flatnonzero(t_mask)


def iter_switches(adj: np.ndarray) -> Iterator[SwitchCandidate]:
    """Enumerates every legal switch of a graph.

    The order is u ascending, then v > u ascending, then s ascending, then t
    ascending.
    """
    n: int = adj.shape[0]
    for u in range(n):
        for v in range(u + 1, n):
            s_cands, t_cands = switch_partners(adj, u, v)
            if not len(s_cands) or not len(t_cands):
                continue
            for s in s_cands:
                for t in t_cands:
                    if s != t:
                        yield SwitchCandidate(u, v, int(s), int(t))


def is_regular(adj: np.ndarray, d: Optional[int] = None) -> bool:
    """Checks that a matrix is the adjacency matrix of a simple regular graph.

    Args:
        adj: Square matrix to check.
        d: Expected common degree. If None, any common degree is accepted.

    Returns:
        True if the matrix is symmetric, 0/1-valued, has a zero diagonal and all
        row sums are equal (and equal to d when given).
    """
    if adj.ndim != 2 or adj.shape[0] != adj.shape[1]:
        return False
    if not np.isin(adj, (0, 1)).all():
        return False
    if not np.array_equal(adj, adj.T) or np.any(np.diag(adj)):
        return False

    degrees: np.ndarray = adj.sum(axis=1)
    if len(degrees) == 0:
        return True
    expected: int = int(degrees[0]) if d is None else d
    return bool(np.all(degrees == expected))


class RegularGraphGenerator:
    """Builds random d-regular graphs with a pairing model and local repairs.

    Vertices are visited in a fresh random order on every pass. Two vertices that
    still miss edges are joined whenever they are not adjacent yet. When every
    deficient vertex is already adjacent to every other deficient vertex, an
    existing edge (p, q) is broken up and its endpoints are reconnected to the
    deficient vertices, which raises their degree while leaving the degrees of
    p and q unchanged.

    Termination is probabilistic. For feasible (n, d) a regular graph is
    reached with high likelihood and no iteration cap is imposed.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        random_state: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initializes the generator.

        Args:
            seed: Random seed for reproducible graphs. Ignored if random_state is given.
            random_state: Random number generator to draw permutations from.
            logger: Logger instance for logging generation activities.
        """
        self.seed: Optional[int] = seed
        if random_state is not None:
            self.random_state: random.Random = random_state
        else:
            self.random_state = random.Random()
            if self.seed is not None:
                self.random_state.seed(self.seed)
        self.logger: logging.Logger = logger if logger is not None else logging.getLogger(__name__)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(seed={self.seed})"

    @staticmethod
    def check_instance(n: int, d: int) -> None:
        """Raises InvalidInstanceError if no (n, d)-regular graph exists."""
        if n < 0 or d < 0:
            raise InvalidInstanceError(n, d, "n and d must be non-negative")
        if d % 2 and n % 2:
            raise InvalidInstanceError(
                n, d, "either the number of vertices or the degree must be even"
            )
        if n <= d:
            raise InvalidInstanceError(
                n, d, "the number of vertices must be larger than the degree"
            )

    def random_permutation(self, n: int) -> List[int]:
        perm: List[int] = list(range(n))
        self.random_state.shuffle(perm)
        return perm

    def generate(self, n: int, d: int) -> np.ndarray:
        """Generates a random d-regular graph on n vertices.

        Args:
            n: Number of vertices.
            d: Common vertex degree.

        Returns:
            An (n, n) symmetric 0/1 adjacency matrix with zero diagonal and all
            row sums equal to d.

        Raises:
            InvalidInstanceError: If d and n are both odd or n <= d.
        """
        self.check_instance(n, d)

        adj: np.ndarray = np.zeros((n, n), dtype=ADJ_DTYPE)
        deg: List[int] = [0] * n
        num_passes: int = 0

        while True:
            num_passes += 1
            perm: List[int] = self.random_permutation(n)

            joined, deficient, stuck = self._join_deficient_pair(adj, deg, d, perm)
            if joined:
                continue
            if not deficient:
                break

            r, s = stuck
            if s is None:
                repaired: bool = self._repair_single(adj, deg, perm, r)
            else:
                repaired = self._repair_pair(adj, deg, perm, r, s)
            if not repaired:
                self.logger.debug(f"No edge to break up for vertices {stuck}, retrying.")

        self.logger.debug(f"Generated a random ({n}, {d})-regular graph in {num_passes} passes.")
        return adj

    @staticmethod
    def _join_deficient_pair(
        adj: np.ndarray, deg: List[int], d: int, perm: List[int]
    ) -> Tuple[bool, bool, Tuple[Optional[int], Optional[int]]]:
        """Joins the first non-adjacent pair of deficient vertices in permutation order.

        Returns:
            A tuple (joined, deficient, stuck) where joined tells whether an edge was
            added, deficient tells whether any vertex still misses edges, and stuck
            holds the vertices (r, s) to repair when nothing could be joined. s is
            None when a single deficient vertex had no deficient partner.
        """
        n: int = len(perm)
        deficient: bool = False
        r: Optional[int] = None
        s: Optional[int] = None
        partner_found: bool = False

        for i in range(n):
            x: int = perm[i]
            if deg[x] >= d:
                continue
            deficient = True
            last: int = x
            for j in range(i + 1, n):
                y: int = perm[j]
                if deg[y] >= d:
                    continue
                partner_found = True
                if adj[x, y] == 0:
                    adj[x, y] = adj[y, x] = 1
                    deg[x] += 1
                    deg[y] += 1
                    return True, True, (None, None)
                r, s = x, y

        if deficient and not partner_found:
            r, s = last, None
        return False, deficient, (r, s)

    @staticmethod
    def _repair_single(adj: np.ndarray, deg: List[int], perm: List[int], r: int) -> bool:
        """Replaces an edge (p, q) with edges (r, p) and (r, q) for p and q not adjacent to r."""
        n: int = len(perm)
        for i in range(n - 1):
            p: int = perm[i]
            if p == r or adj[r, p]:
                continue
            for j in range(i + 1, n):
                q: int = perm[j]
                if q == r or not adj[p, q] or adj[r, q]:
                    continue
                adj[p, q] = adj[q, p] = 0
                adj[r, p] = adj[p, r] = 1
                adj[r, q] = adj[q, r] = 1
                deg[r] += 2
                return True
        return False

    @staticmethod
    def _repair_pair(
        adj: np.ndarray, deg: List[int], perm: List[int], r: int, s: int
    ) -> bool:
        """Replaces an edge (p, q) with edges (r, p) and (s, q) for p not adjacent to r
        and q not adjacent to s."""
        for p in perm:
            if p in (r, s) or adj[r, p]:
                continue
            for q in perm:
                if q in (r, s) or not adj[p, q] or adj[s, q]:
                    continue
                adj[p, q] = adj[q, p] = 0
                adj[r, p] = adj[p, r] = 1
                adj[s, q] = adj[q, s] = 1
                deg[r] += 1
                deg[s] += 1
                return True
        return False
