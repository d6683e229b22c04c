"""
MIP engine boundary.

The encoder and decoder only depend on the MIPEngine protocol:

  - add_binary_variable(name) -> handle
  - add_linear_constraint(terms, sense, rhs, name)
  - optimize() -> EngineStatus
  - value_of(handle) -> 0 | 1

PulpEngine implements it on top of PuLP, so any solver PuLP can drive
(CBC by default) can sit behind the pipeline. Tests substitute their own
engines through the same protocol.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, List, Optional, Protocol, Sequence, Tuple

import pulp

from str8ts.constraints.builder import Sense
from str8ts.solver.config import SolverConfig


logger = logging.getLogger(__name__)


class EngineStatus(Enum):
    FEASIBLE = "feasible"
    INFEASIBLE = "infeasible"
    ERROR = "error"


class MIPEngine(Protocol):
    """Model-building protocol every solving backend must offer."""

    def add_binary_variable(self, name: str) -> Any:
        ...

    def add_linear_constraint(
        self,
        terms: Sequence[Tuple[Any, float]],
        sense: Sense,
        rhs: float,
        name: str,
    ) -> None:
        ...

    def optimize(self) -> EngineStatus:
        ...

    def value_of(self, handle: Any) -> int:
        ...


# PuLP status string -> engine status. "Not Solved" and "Undefined" mean the
# backend stopped without a solution, which is reported like infeasibility.
_PULP_STATUS_MAP = {
    "Optimal": EngineStatus.FEASIBLE,
    "Infeasible": EngineStatus.INFEASIBLE,
    "Not Solved": EngineStatus.INFEASIBLE,
    "Undefined": EngineStatus.INFEASIBLE,
    "Unbounded": EngineStatus.ERROR,
}


class PulpEngine:
    """
    MIPEngine backed by a pulp.LpProblem.

    Each instance is one model; build a new engine for every solve.

    Example:
        >>> engine = PulpEngine(SolverConfig())
        >>> a = engine.add_binary_variable("a")
        >>> engine.add_linear_constraint([(a, 1.0)], Sense.EQ, 1.0, "fix_a")
        >>> engine.optimize()
        <EngineStatus.FEASIBLE: 'feasible'>
        >>> engine.value_of(a)
        1
    """

    def __init__(self, config: Optional[SolverConfig] = None, name: str = "str8ts"):
        self.config = config if config is not None else SolverConfig()
        self.prob = pulp.LpProblem(name, pulp.LpMinimize)
        # Zero objective (feasibility only)
        self.prob += 0
        self.status_name = "Not Solved"
        self._variables: List[pulp.LpVariable] = []

    def add_binary_variable(self, name: str) -> pulp.LpVariable:
        # The problem picks variables up from the constraints that use them
        var = pulp.LpVariable(name, lowBound=0, upBound=1, cat=pulp.LpBinary)
        self._variables.append(var)
        return var

    def add_linear_constraint(
        self,
        terms: Sequence[Tuple[pulp.LpVariable, float]],
        sense: Sense,
        rhs: float,
        name: str,
    ) -> None:
        expr = pulp.lpSum(coeff * var for var, coeff in terms)
        if sense is Sense.EQ:
            self.prob += (expr == rhs, name)
        elif sense is Sense.LE:
            self.prob += (expr <= rhs, name)
        elif sense is Sense.GE:
            self.prob += (expr >= rhs, name)
        else:
            raise ValueError(f"Unknown constraint sense: {sense}")

    def _make_solver(self) -> pulp.LpSolver:
        kwargs = {"msg": self.config.msg}
        if self.config.time_limit is not None:
            kwargs["timeLimit"] = self.config.time_limit
        if self.config.threads is not None:
            kwargs["threads"] = self.config.threads
        return pulp.getSolver(self.config.solver_name, **kwargs)

    def optimize(self) -> EngineStatus:
        """
        Solve the model as a pure feasibility problem (zero objective).

        An empty model is feasible without calling the backend.
        """
        if not self._variables:
            logger.debug("Empty model, skipping backend call")
            self.status_name = "Optimal"
            return EngineStatus.FEASIBLE

        try:
            status = self.prob.solve(self._make_solver())
        except pulp.PulpSolverError as e:
            logger.error("Backend %s failed: %s", self.config.solver_name, e)
            self.status_name = f"Error: {e}"
            return EngineStatus.ERROR

        self.status_name = pulp.LpStatus[status]
        logger.debug("Backend %s finished with status %s", self.config.solver_name, self.status_name)
        return _PULP_STATUS_MAP.get(self.status_name, EngineStatus.ERROR)

    def value_of(self, handle: pulp.LpVariable) -> int:
        # Guard against None or float noise (use > 0.5 threshold)
        val = pulp.value(handle)
        return 1 if val is not None and val > 0.5 else 0


def make_engine(config: Optional[SolverConfig] = None) -> PulpEngine:
    """Default engine factory used by the pipeline."""
    return PulpEngine(config)
