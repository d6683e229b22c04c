"""
MIP solve driver.

This module hands a ConstraintBuilder to a MIPEngine and reads the result:
  - Registers one engine variable per builder key
  - Submits every LinearConstraint
  - Calls optimize()
  - Reads back the x[c,d] indicators when the model is feasible

The driver never interprets the values; see str8ts.solver.decoding.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from str8ts.constraints.builder import ConstraintBuilder
from str8ts.constraints.indexing import VarKey
from str8ts.core.grid_types import Str8tsError
from str8ts.solver.config import SolverConfig
from str8ts.solver.engine import EngineStatus, MIPEngine, make_engine


logger = logging.getLogger(__name__)


class SolverEngineError(Str8tsError):
    """Raised when the engine reports an error instead of a verdict."""


@dataclass
class ModelSolution:
    """
    Engine verdict for one model.

    Attributes:
        status: FEASIBLE or INFEASIBLE (ERROR is raised, never returned)
        solver_status: Raw backend status string (e.g. "Optimal", "Infeasible")
        values: x[c,d] key -> 0/1, empty unless status is FEASIBLE
    """
    status: EngineStatus
    solver_status: str
    values: Dict[VarKey, int] = field(default_factory=dict)

    @property
    def feasible(self) -> bool:
        return self.status is EngineStatus.FEASIBLE


def submit_model(builder: ConstraintBuilder, engine: MIPEngine) -> Dict[VarKey, Any]:
    """
    Feed every variable and constraint of builder into engine.

    Returns:
        Map from builder key to the engine's variable handle
    """
    handles = {
        key: engine.add_binary_variable(name)
        for key, name in builder.variables.items()
    }

    for lc in builder.constraints:
        assert len(lc.keys) == len(lc.coeffs), \
            f"Constraint {lc.name} has mismatched keys/coeffs: {len(lc.keys)} vs {len(lc.coeffs)}"
        terms = [(handles[key], coeff) for key, coeff in zip(lc.keys, lc.coeffs)]
        engine.add_linear_constraint(terms, lc.sense, lc.rhs, lc.name)

    return handles


def solve_model(
    builder: ConstraintBuilder,
    engine: Optional[MIPEngine] = None,
    config: Optional[SolverConfig] = None,
) -> ModelSolution:
    """
    Submit a model, optimize it and read back the cell indicators.

    Args:
        builder: Complete model from str8ts.constraints.encoder.encode_grid
        engine: Fresh engine to use; a PulpEngine built from config when None
        config: Solver config for the default engine

    Returns:
        ModelSolution with status FEASIBLE (values filled) or INFEASIBLE

    Raises:
        SolverEngineError: if the engine returns EngineStatus.ERROR
    """
    if engine is None:
        engine = make_engine(config)

    handles = submit_model(builder, engine)
    logger.debug(
        "Submitted %d variables and %d constraints",
        builder.num_variables, builder.num_constraints,
    )

    status = engine.optimize()
    solver_status = getattr(engine, "status_name", status.value)

    if status is EngineStatus.ERROR:
        raise SolverEngineError(f"Solver engine error: {solver_status}")

    if status is EngineStatus.INFEASIBLE:
        return ModelSolution(status=status, solver_status=solver_status)

    values = {key: engine.value_of(handles[key]) for key in builder.x_keys()}
    return ModelSolution(status=status, solver_status=solver_status, values=values)
