"""
Smoke test for the kernel runner with full solver integration.

This test verifies that the complete pipeline works:
  1. Load the example puzzle from puzzles/
  2. Extract compartments and encode the rules
  3. Solve with the default PuLP engine
  4. Decode x -> filled grid

It also drives the diagnostics path with engines that misbehave, to check
that failures land in the right status instead of escaping.
"""

from pathlib import Path

from str8ts.core.puzzle_io import load_grid
from str8ts.features.rule_checks import find_rule_violations
from str8ts.runners.kernel import solve_puzzle_with_diagnostics
from str8ts.solver.engine import EngineStatus


EXAMPLE_PUZZLE = Path(__file__).resolve().parents[2] / "puzzles" / "example_9x9.txt"


class _ScriptedEngine:
    """Accepts any model and answers with a fixed status and all-zero values."""

    def __init__(self, status: EngineStatus):
        self.status = status

    def add_binary_variable(self, name):
        return name

    def add_linear_constraint(self, terms, sense, rhs, name):
        pass

    def optimize(self):
        return self.status

    def value_of(self, handle):
        return 0


class _CrashingEngine(_ScriptedEngine):
    def optimize(self):
        raise RuntimeError("backend went away")


def test_kernel_smoke():
    print("\n" + "=" * 70)
    print("KERNEL SMOKE TEST")
    print("=" * 70)

    puzzle = load_grid(EXAMPLE_PUZZLE)
    print(f"\nPuzzle: {EXAMPLE_PUZZLE.name} ({puzzle.size}x{puzzle.size})")

    result, diag = solve_puzzle_with_diagnostics(puzzle)

    print(f"  Status: {diag.status} ({diag.solver_status})")
    print(f"  Compartments: {diag.num_compartments} ({diag.num_run_compartments} runs)")
    print(f"  Model: {diag.num_variables} variables, {diag.num_constraints} constraints")

    assert diag.status == "ok", f"Expected ok, got {diag.status}: {diag.error_message}"
    assert result.is_filled()
    assert find_rule_violations(result, puzzle=puzzle) == []

    print("\n✓ Kernel smoke test passed")


def test_kernel_diagnostics_on_bad_engines():
    print("\n" + "=" * 70)
    print("KERNEL DIAGNOSTICS: MISBEHAVING ENGINES")
    print("=" * 70)

    puzzle = load_grid(EXAMPLE_PUZZLE)

    # Feasible status but no digit chosen anywhere
    result, diag = solve_puzzle_with_diagnostics(
        puzzle, engine_factory=lambda config: _ScriptedEngine(EngineStatus.FEASIBLE)
    )
    print(f"  all-zero engine -> {diag.status}: {diag.error_message}")
    assert result is None
    assert diag.status == "invalid"
    assert diag.error_message.startswith("InconsistentSolutionError")

    result, diag = solve_puzzle_with_diagnostics(
        puzzle, engine_factory=lambda config: _ScriptedEngine(EngineStatus.ERROR)
    )
    print(f"  error engine    -> {diag.status}: {diag.error_message}")
    assert result is None
    assert diag.status == "error"

    result, diag = solve_puzzle_with_diagnostics(
        puzzle, engine_factory=lambda config: _CrashingEngine(EngineStatus.FEASIBLE)
    )
    print(f"  crashing engine -> {diag.status}: {diag.error_message}")
    assert result is None
    assert diag.status == "error"
    assert "backend went away" in diag.error_message

    print("\n✓ Diagnostics smoke test passed")


if __name__ == "__main__":
    test_kernel_smoke()
    test_kernel_diagnostics_on_bad_engines()
