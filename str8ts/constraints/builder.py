"""
Linear constraint builder for the Str8ts model.

The builder is the per-solve arena: it owns the binary variables (by key)
and the linear constraints over them until the model is handed to an
engine. Nothing here talks to a solver.

Constraints have the form:
    sum_i coeffs[i] * var[keys[i]]  (<= | == | >=)  rhs
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from str8ts.constraints.indexing import VarKey, is_x_key, var_name, x_key


class Sense(Enum):
    LE = "<="
    EQ = "=="
    GE = ">="


@dataclass
class LinearConstraint:
    """
    A single linear constraint over model variables:

        sum_i coeffs[i] * var[keys[i]]  sense  rhs

    Attributes:
        keys: Variable keys (see str8ts.constraints.indexing)
        coeffs: Coefficients (same length as keys)
        sense: Comparison operator
        rhs: Right-hand side value
        name: Unique constraint name, used by the engine

    Example:
        # x[0,0,3] == 1 (cell (0,0) holds a 3)
        LinearConstraint(keys=[("x", 0, 0, 3)], coeffs=[1.0], sense=Sense.EQ,
                         rhs=1.0, name="clue_0_0")
    """
    keys: List[VarKey]
    coeffs: List[float]
    sense: Sense
    rhs: float
    name: str


@dataclass
class ConstraintBuilder:
    """
    Collects binary variables and linear constraints for one solve.

    Attributes:
        variables: Insertion-ordered map from key to variable name
        constraints: List of LinearConstraint objects
    """
    variables: Dict[VarKey, str] = field(default_factory=dict)
    constraints: List[LinearConstraint] = field(default_factory=list)

    @property
    def num_variables(self) -> int:
        return len(self.variables)

    @property
    def num_constraints(self) -> int:
        return len(self.constraints)

    def x_keys(self) -> List[VarKey]:
        return [key for key in self.variables if is_x_key(key)]

    def add_binary_var(self, key: VarKey) -> VarKey:
        """
        Register a binary variable.

        Raises:
            ValueError: if the key is already registered
        """
        if key in self.variables:
            raise ValueError(f"Variable {key} registered twice")
        self.variables[key] = var_name(key)
        return key

    def add_constraint(
        self,
        keys: List[VarKey],
        coeffs: List[float],
        sense: Sense,
        rhs: float,
        name: str,
    ) -> None:
        """
        Add a generic linear constraint.

        Raises:
            AssertionError: If keys and coeffs have different lengths
            KeyError: If a key refers to an unregistered variable
        """
        assert len(keys) == len(coeffs), \
            f"keys and coeffs must have same length, got {len(keys)} != {len(coeffs)}"

        for key in keys:
            if key not in self.variables:
                raise KeyError(f"Constraint {name} uses unregistered variable {key}")

        self.constraints.append(
            LinearConstraint(keys=list(keys), coeffs=list(coeffs), sense=sense, rhs=rhs, name=name)
        )

    def add_eq(self, keys: List[VarKey], coeffs: List[float], rhs: float, name: str) -> None:
        self.add_constraint(keys, coeffs, Sense.EQ, rhs, name)

    def add_le(self, keys: List[VarKey], coeffs: List[float], rhs: float, name: str) -> None:
        self.add_constraint(keys, coeffs, Sense.LE, rhs, name)

    def add_ge(self, keys: List[VarKey], coeffs: List[float], rhs: float, name: str) -> None:
        self.add_constraint(keys, coeffs, Sense.GE, rhs, name)

    def fix_cell_digit(self, row: int, col: int, digit: int) -> None:
        """
        Enforce that cell (row, col) holds digit: x[c,digit] = 1.

        Zeroing the other digits is left to the cell's one-hot constraint.
        """
        self.add_eq([x_key(row, col, digit)], [1.0], 1.0, f"clue_{row}_{col}")

    def forbid_cell_digit(self, row: int, col: int, digit: int, name: str) -> None:
        """Enforce that cell (row, col) does NOT hold digit: x[c,digit] = 0."""
        self.add_eq([x_key(row, col, digit)], [1.0], 0.0, name)
