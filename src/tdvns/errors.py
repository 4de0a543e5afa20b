# ===--------------------------------------------------------------------------------------===#
#
# Part of the TDVNS Project, under the Apache License v2.0.
# See https://www.apache.org/licenses/LICENSE-2.0 for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements the exceptions raised by the search engine.
#
# ===--------------------------------------------------------------------------------------===#


class InvalidInstanceError(ValueError):
    """Raised when no d-regular graph on n vertices can exist.

    Retrying cannot change feasibility, so callers should abort the run.
    """

    def __init__(self, n: int, d: int, reason: str):
        self.n: int = n
        self.d: int = d
        self.reason: str = reason
        super().__init__(f"No ({n}, {d})-regular graph exists: {reason}")


class DeadlockError(RuntimeError):
    """Raised when the current graph admits no legal 2-switch."""

    pass
