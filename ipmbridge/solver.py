"""
High-level solver interface for the interior-point bridge
"""
import logging
import time
from typing import Callable, Optional

import numpy as np

from .mapping import compute_infeasibilities, map_basic_solution
from .model import LinearProgram
from .parameters import Parameters
from .results import ModelStatus, Results
from .session import SolveStatus, SolverSession
from .status import Outcome, translate
from .transform import build_standard_form

_LOGGER = logging.getLogger(__name__)

_MODEL_STATUS = {
    Outcome.OPTIMAL: ModelStatus.OPTIMAL,
    Outcome.IMPRECISE: ModelStatus.OPTIMAL,
    Outcome.PRIMAL_INFEASIBLE: ModelStatus.PRIMAL_INFEASIBLE,
    Outcome.UNBOUNDED: ModelStatus.PRIMAL_UNBOUNDED,
    Outcome.TIME_LIMIT: ModelStatus.REACHED_TIME_LIMIT,
    Outcome.ITERATION_LIMIT: ModelStatus.REACHED_ITERATION_LIMIT,
    Outcome.UNRESOLVED: ModelStatus.NOTSET,
}


def _default_session_factory() -> SolverSession:
    from .highs_session import HighsIpmSession
    return HighsIpmSession()


class IPMSolver:
    """
    Solve general-form LPs with an interior-point solver.

    Each call to :meth:`solve` converts the LP to standard form, runs one
    session created by ``session_factory``, interprets the reported status,
    and on success maps the basic solution back to the original LP.

    Parameters
    ----------
    session_factory : callable, optional
        Zero-argument callable returning a fresh SolverSession. Defaults to
        :class:`ipmbridge.highs_session.HighsIpmSession`.
    param : Parameters, optional
        Solver parameters. If None, default parameters are used.

    Examples
    --------
    >>> import numpy as np
    >>> from ipmbridge import IPMSolver, LinearProgram
    >>>
    >>> lp = LinearProgram.from_arrays(
    ...     np.array([[1.0, 2.0], [3.0, 1.0]]),
    ...     row_lower=np.array([-np.inf, -np.inf]),
    ...     row_upper=np.array([10.0, 12.0]),
    ...     col_lower=np.zeros(2),
    ...     col_upper=np.full(2, np.inf),
    ...     cost=np.array([-3.0, -5.0]),
    ... )
    >>> result = IPMSolver().solve(lp)
    >>> print(f"Status: {result.model_status}")
    >>> print(f"Optimal value: {result.objective_value}")
    """

    def __init__(self, session_factory: Optional[Callable[[], SolverSession]] = None,
                 param: Optional[Parameters] = None):
        self.session_factory = session_factory if session_factory is not None else _default_session_factory
        self.param = param if param is not None else Parameters()

    def solve(
        self,
        lp: LinearProgram,
        param: Optional[Parameters] = None,
        elapsed: Optional[Callable[[], float]] = None,
    ) -> Results:
        """
        Solve a linear programming problem.

        Parameters
        ----------
        lp : LinearProgram
            Model to solve; it is not modified
        param : Parameters, optional
            Solver parameters. If None, uses solver's default parameters.
        elapsed : callable, optional
            Returns the seconds already spent by the caller's run. The solver
            is given ``param.time_limit - elapsed()`` seconds. Defaults to a
            clock started by this call.

        Returns
        -------
        Results
            Model status, solution and statistics
        """
        if param is None:
            param = self.param
        if elapsed is None:
            start = time.perf_counter()
            elapsed = lambda: time.perf_counter() - start

        model = build_standard_form(lp)

        session = self.session_factory()
        time_budget = param.time_limit - elapsed()
        session.configure(param.to_solver_settings(time_budget))

        tic = time.perf_counter()
        solve_status = session.solve(model)
        info = session.get_info()

        results = Results()
        results.run_time = time.perf_counter() - tic

        classification = translate(solve_status, info)
        results.classification = classification
        if solve_status in (SolveStatus.SOLVED, SolveStatus.STOPPED):
            results.iteration_count = int(info.iter)

        if classification.fatal:
            results.model_status = ModelStatus.SOLVE_ERROR
            return results
        results.model_status = _MODEL_STATUS[classification.outcome]
        if not classification.has_solution:
            return results

        # Final IPM iterate, available whenever the solver did not run out of memory
        interior = session.get_interior_solution()
        results.interior_x = np.array(interior.x[:lp.num_col], dtype=np.float64)

        solution = map_basic_solution(lp, model, session.get_basic_solution())
        results.col_value = solution.col_value
        results.col_dual = solution.col_dual
        results.row_value = solution.row_value
        results.row_dual = solution.row_dual
        results.col_basis = solution.col_basis
        results.row_basis = solution.row_basis
        results.cleanup_required = classification.cleanup_required
        results.objective_value = lp.offset + float(np.dot(lp.col_cost, solution.col_value))
        results.infeasibilities = compute_infeasibilities(
            lp, solution,
            param.primal_feasibility_tolerance,
            param.dual_feasibility_tolerance,
        )
        _LOGGER.debug("IPM objective %.10g after %d iterations", results.objective_value,
                      results.iteration_count)
        return results


def solve(
    lp: LinearProgram,
    session_factory: Optional[Callable[[], SolverSession]] = None,
    param: Optional[Parameters] = None,
) -> Results:
    """
    Convenience function to solve an LP without creating a solver object.

    Parameters
    ----------
    lp : LinearProgram
        Model to solve
    session_factory : callable, optional
        Zero-argument callable returning a fresh SolverSession
    param : Parameters, optional
        Solver parameters. If None, default parameters are used.

    Returns
    -------
    Results
        Model status, solution and statistics

    Examples
    --------
    >>> from ipmbridge import solve
    >>>
    >>> result = solve(lp)
    >>> print(result)
    """
    solver = IPMSolver(session_factory=session_factory, param=param)
    return solver.solve(lp)
