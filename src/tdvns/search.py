# ===--------------------------------------------------------------------------------------===#
#
# Part of the TDVNS Project, under the Apache License v2.0.
# See https://www.apache.org/licenses/LICENSE-2.0 for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements the main variable neighborhood search loop.
#
# ===--------------------------------------------------------------------------------------===#

from typing import Callable, List, Optional, Tuple

from dataclasses import dataclass, field
from enum import Enum
import logging
import random
import time

from tdvns.descent import DEFAULT_TOLERANCE, SteepestDescent
from tdvns.errors import DeadlockError, InvalidInstanceError
from tdvns.graph import RegularGraphGenerator
from tdvns.shake import DEFAULT_MAX_RANDOM_TRIALS, ShakeDiversifier
from tdvns.solution import Solution


@dataclass
class SearchConfig:
    """Configuration block for the variable neighborhood search."""

    max_shake: int = 100
    max_time_ms: int = 100_000
    max_restarts: int = 1
    max_random_trials: int = DEFAULT_MAX_RANDOM_TRIALS
    tolerance: float = DEFAULT_TOLERANCE
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.max_restarts < 1:
            raise ValueError(f"max_restarts must be positive, got {self.max_restarts}.")
        for name in ("max_shake", "max_time_ms", "max_random_trials", "tolerance"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}.")


class TerminationReason(str, Enum):
    PERFECT = "perfect"
    SHAKE_BUDGET = "shake_budget"
    TIME_BUDGET = "time_budget"
    INVALID_INSTANCE = "invalid_instance"


@dataclass
class SearchResult:
    """Outcome of a search run.

    Attributes:
        n: Number of vertices.
        d: Common vertex degree.
        reason: Why the search stopped.
        best: Best solution found, None if the instance is infeasible.
        elapsed_ms: Wall-clock time spent in the run.
        num_iterations: Number of shake/descend iterations performed.
        num_regenerations: Number of times the current solution was regenerated
            after a deadlock.
        history: (elapsed_ms, neqtd, value) of every best solution. The first entry
            is the descended initial solution, which becomes the first best
            without improving on anything; each later entry has a smaller neqtd.
    """

    n: int
    d: int
    reason: TerminationReason
    best: Optional[Solution] = None
    elapsed_ms: float = 0.0
    num_iterations: int = 0
    num_regenerations: int = 0
    history: List[Tuple[float, int, float]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.reason == TerminationReason.PERFECT

    @property
    def value(self) -> Optional[float]:
        return self.best.value if self.best is not None else None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}"
            "("
            f"n={self.n},"
            f"d={self.d},"
            f"reason={self.reason.value},"
            f"best={self.best},"
            f"elapsed_ms={self.elapsed_ms:.1f},"
            f"num_iterations={self.num_iterations}"
            ")"
        )


NewBestCallback = Callable[[Solution, float], None]


class VNSearch:
    """Variable neighborhood search for regular graphs with distinct triangle-degrees.

    The search keeps a current solution, which is shaken and descended, and a
    snapshot of the best solution seen so far. The shake strength grows by one
    after every iteration that does not reduce the number of colliding vertex
    pairs and is reset to one on improvement or after a deadlock. A deadlocked
    current solution is replaced with a fresh random regular graph.
    """

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        generator: Optional[RegularGraphGenerator] = None,
        descent: Optional[SteepestDescent] = None,
        shaker: Optional[ShakeDiversifier] = None,
        logger: Optional[logging.Logger] = None,
        on_new_best: Optional[NewBestCallback] = None,
    ):
        """Initializes the search and any components that are not supplied.

        Args:
            config: Search parameters. Defaults to SearchConfig().
            generator: Random regular graph generator.
            descent: Steepest descent used after every structural change.
            shaker: Shaking step used between descents.
            logger: Logger instance for logging search progress.
            on_new_best: Called with the best solution and the elapsed time in
                milliseconds, once for the descended initial solution of every
                run and again whenever the best solution improves.
        """
        self.config: SearchConfig = config if config is not None else SearchConfig()
        self.logger: logging.Logger = logger if logger is not None else logging.getLogger(__name__)

        random_state: random.Random = random.Random()
        if self.config.seed is not None:
            random_state.seed(self.config.seed)

        self.generator: RegularGraphGenerator = (
            generator
            if generator is not None
            else RegularGraphGenerator(random_state=random_state, logger=self.logger)
        )
        self.descent: SteepestDescent = (
            descent
            if descent is not None
            else SteepestDescent(tolerance=self.config.tolerance, logger=self.logger)
        )
        self.shaker: ShakeDiversifier = (
            shaker
            if shaker is not None
            else ShakeDiversifier(
                random_state=random_state,
                max_random_trials=self.config.max_random_trials,
                logger=self.logger,
            )
        )
        self.on_new_best: Optional[NewBestCallback] = on_new_best

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}"
            "("
            f"config={self.config},"
            f"generator={self.generator},"
            f"descent={self.descent},"
            f"shaker={self.shaker}"
            ")"
        )

    def random_solution(self, n: int, d: int) -> Solution:
        """Builds a solution from a fresh random regular graph."""
        self.logger.info("Generating a random regular graph as an initial solution...")
        sol: Solution = Solution.from_graph(self.generator.generate(n, d), d)
        self.logger.info(f"Initial solution: {sol}")
        return sol

    def _report_new_best(self, result: SearchResult, best: Solution, elapsed_ms: float) -> None:
        result.history.append((elapsed_ms, best.neqtd, best.value))
        self.logger.info(f"Better solution found: time={elapsed_ms:.0f}ms, {best}")
        if self.on_new_best is not None:
            self.on_new_best(best, elapsed_ms)

    def run(self, n: int, d: int) -> SearchResult:
        """Searches for an (n, d)-regular graph with pairwise distinct triangle-degrees.

        Wall-clock time is polled once per iteration, so a single shake or descent
        may overrun the time budget before the search notices.

        Args:
            n: Number of vertices.
            d: Common vertex degree.

        Returns:
            The best solution found and the reason the search stopped. If no
            (n, d)-regular graph exists, the result has no solution and the reason
            INVALID_INSTANCE.
        """
        start: float = time.monotonic()

        def elapsed_ms() -> float:
            return (time.monotonic() - start) * 1000.0

        self.logger.info(f"============ STARTING SEARCH n={n} d={d} ============")
        self.logger.info(f"config = {self.config}")

        try:
            current: Solution = self.random_solution(n, d)
        except InvalidInstanceError as err:
            self.logger.error(f"{err}. Stopping execution...")
            return SearchResult(
                n=n, d=d, reason=TerminationReason.INVALID_INSTANCE, elapsed_ms=elapsed_ms()
            )

        self.logger.info("The first steepest descent...")
        self.descent.descend(current)

        best: Solution = current.copy()
        result: SearchResult = SearchResult(n=n, d=d, reason=TerminationReason.SHAKE_BUDGET)
        self._report_new_best(result, best, elapsed_ms())

        k: int = 1
        while True:
            if best.neqtd == 0:
                result.reason = TerminationReason.PERFECT
                break
            if k > self.config.max_shake:
                result.reason = TerminationReason.SHAKE_BUDGET
                break
            if elapsed_ms() > self.config.max_time_ms:
                result.reason = TerminationReason.TIME_BUDGET
                break

            result.num_iterations += 1
            self.logger.debug(f"Shaking with strength {k}...")
            try:
                self.shaker.shake(current, k)
            except DeadlockError:
                self.logger.info("Deadlock while shaking, restarting from a new random graph.")
                current = self.random_solution(n, d)
                result.num_regenerations += 1
                k = 1
            self.descent.descend(current)

            if current.neqtd < best.neqtd:
                best = current.copy()
                k = 1
                self._report_new_best(result, best, elapsed_ms())
            else:
                k += 1

        result.best = best
        result.elapsed_ms = elapsed_ms()

        match result.reason:
            case TerminationReason.PERFECT:
                self.logger.info("Stopping: all triangle degrees are distinct.")
            case TerminationReason.SHAKE_BUDGET:
                self.logger.info("Stopping: maximum amount of shaking reached without improvement...")
            case TerminationReason.TIME_BUDGET:
                self.logger.info(
                    f"Stopping: maximum amount of time ({result.elapsed_ms:.0f}ms) passed..."
                )
        self.logger.info(f"Best solution found: {best}")
        return result


def better_result(a: Optional[SearchResult], b: SearchResult) -> SearchResult:
    """Returns the result with the better best solution, preferring a on ties."""
    if a is None or a.best is None:
        return b
    if b.best is None:
        return a
    if (b.best.neqtd, b.best.value) < (a.best.neqtd, a.best.value):
        return b
    return a


def search_with_restarts(
    n: int,
    d: int,
    config: Optional[SearchConfig] = None,
    logger: Optional[logging.Logger] = None,
    on_new_best: Optional[NewBestCallback] = None,
) -> SearchResult:
    """Runs up to config.max_restarts independent searches and keeps the best result.

    All runs share one random number generator, so a seeded configuration makes
    the whole sequence reproducible. The loop stops early when a perfect solution
    is found or the instance turns out to be infeasible.
    """
    config = config if config is not None else SearchConfig()
    logger = logger if logger is not None else logging.getLogger(__name__)

    search: VNSearch = VNSearch(config=config, logger=logger, on_new_best=on_new_best)
    best_result: Optional[SearchResult] = None

    for restart in range(config.max_restarts):
        logger.info(f"========= RUN {restart + 1}/{config.max_restarts} =========")
        result: SearchResult = search.run(n, d)
        best_result = better_result(best_result, result)
        if result.reason in (TerminationReason.PERFECT, TerminationReason.INVALID_INSTANCE):
            break

    return best_result
