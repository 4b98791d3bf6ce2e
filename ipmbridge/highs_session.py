"""
SolverSession backed by the HiGHS interior-point solver shipped with SciPy
"""
import logging
import math
from typing import Any, Dict

import numpy as np
from scipy import sparse
from scipy.optimize import linprog

from .session import (
    BasicSolution,
    BasisCode,
    ErrorFlag,
    InteriorSolution,
    PhaseStatus,
    ROW_NONBASIC,
    SolveStatus,
    SolverInfo,
    SolverSession,
)

_LOGGER = logging.getLogger(__name__)

# scipy.optimize.linprog status -> (solve status, IPM status, crossover status)
_LINPROG_STATUS = {
    0: (SolveStatus.SOLVED, PhaseStatus.OPTIMAL, PhaseStatus.OPTIMAL),
    2: (SolveStatus.SOLVED, PhaseStatus.PRIMAL_INFEASIBLE, PhaseStatus.NOT_RUN),
    3: (SolveStatus.SOLVED, PhaseStatus.DUAL_INFEASIBLE, PhaseStatus.NOT_RUN),
    4: (SolveStatus.SOLVED, PhaseStatus.FAILED, PhaseStatus.NOT_RUN),
}


class HighsIpmSession(SolverSession):
    """
    Interior-point session using ``scipy.optimize.linprog(method="highs-ipm")``.

    HiGHS always follows its IPM with crossover, so the ``crossover`` and
    ``debug`` settings are accepted but have no effect. SciPy does not expose
    the final IPM iterate; :meth:`get_interior_solution` reports the point
    returned by HiGHS instead. Neither does it expose the crossover basis, so
    :meth:`get_basic_solution` rebuilds one with exactly one basic entry per
    row from the vertex and its duals.
    """

    def __init__(self):
        self._settings: Dict[str, Any] = {}
        self._model = None
        self._result = None
        self._info = SolverInfo()
        self._row_dual = None
        self._col_dual = None

    def configure(self, settings: Dict[str, Any]) -> None:
        self._settings = dict(settings)
        if not self._settings.get('crossover', True):
            _LOGGER.debug("HiGHS always runs crossover; ignoring crossover=False")
        if self._settings.get('debug', False):
            _LOGGER.debug("HiGHS has no debug mode; ignoring debug=True")

    def _time_limit(self) -> float:
        return float(self._settings.get('time_limit', math.inf))

    def _options(self) -> Dict[str, Any]:
        s = self._settings
        options = {}
        if 'ipm_feasibility_tol' in s:
            options['primal_feasibility_tolerance'] = float(s['ipm_feasibility_tol'])
        if 'ipm_optimality_tol' in s:
            options['dual_feasibility_tolerance'] = float(s['ipm_optimality_tol'])
        if 'ipm_maxiter' in s:
            options['maxiter'] = int(s['ipm_maxiter'])
        time_limit = self._time_limit()
        if math.isfinite(time_limit):
            options['time_limit'] = time_limit
        return options

    def solve(self, model) -> int:
        self._model = model
        self._result = None
        self._row_dual = self._col_dual = None

        # HiGHS reads a zero time limit as unlimited
        if self._time_limit() <= 0.0:
            _LOGGER.debug("No time left for HiGHS (time_limit=%g)", self._time_limit())
            self._info = SolverInfo(status=SolveStatus.STOPPED,
                                    status_ipm=PhaseStatus.TIME_LIMIT)
            return self._info.status

        ctype = np.asarray(model.constraint_type)
        le = np.flatnonzero(ctype == '<')
        ge = np.flatnonzero(ctype == '>')
        eq = np.flatnonzero(ctype == '=')

        A = model.to_csc().tocsr()
        A_ub = b_ub = A_eq = b_eq = None
        if len(le) or len(ge):
            A_ub = sparse.vstack([A[le], -A[ge]], format='csr')
            b_ub = np.concatenate((model.rhs[le], -model.rhs[ge]))
        if len(eq):
            A_eq = A[eq]
            b_eq = model.rhs[eq]

        try:
            res = linprog(
                model.obj,
                A_ub=A_ub, b_ub=b_ub, A_eq=A_eq, b_eq=b_eq,
                bounds=np.column_stack((model.col_lb, model.col_ub)),
                method='highs-ipm',
                options=self._options(),
            )
        except ValueError as err:
            _LOGGER.debug("HiGHS rejected the model: %s", err)
            self._info = SolverInfo(status=SolveStatus.INVALID_INPUT,
                                    errflag=ErrorFlag.INVALID_VECTOR)
            return self._info.status

        self._result = res
        if res.status == 1:
            limit = PhaseStatus.TIME_LIMIT if 'time limit' in res.message.lower() else PhaseStatus.ITERATION_LIMIT
            codes = (SolveStatus.STOPPED, limit, PhaseStatus.NOT_RUN)
        else:
            codes = _LINPROG_STATUS.get(res.status)
        if codes is None:
            self._info = SolverInfo(status=SolveStatus.INTERNAL_ERROR, errflag=int(res.status))
            return self._info.status

        status, status_ipm, status_crossover = codes
        self._info = SolverInfo(
            status=status,
            status_ipm=status_ipm,
            status_crossover=status_crossover,
            iter=int(getattr(res, 'nit', 0) or 0),
            objval=float(res.fun) if res.fun is not None else 0.0,
        )
        if res.status == 0:
            self._row_dual, self._col_dual = self._duals(res, le, ge, eq)
        return status

    def _duals(self, res, le, ge, eq):
        row_dual = np.zeros(self._model.num_row)
        ub_marginals = np.asarray(res.ineqlin.marginals)
        row_dual[le] = ub_marginals[:len(le)]
        # '>' rows were negated into A_ub
        row_dual[ge] = -ub_marginals[len(le):]
        row_dual[eq] = np.asarray(res.eqlin.marginals)
        col_dual = np.asarray(res.lower.marginals) + np.asarray(res.upper.marginals)
        return row_dual, col_dual

    def get_info(self) -> SolverInfo:
        return self._info

    def _x(self):
        if self._result is None or self._result.x is None:
            return np.zeros(self._model.num_col)
        return np.asarray(self._result.x, dtype=np.float64)

    def get_interior_solution(self) -> InteriorSolution:
        if self._model is None:
            raise RuntimeError("Cannot get interior solution: solve has not been called")
        model = self._model
        x = self._x()
        activity = model.to_csc() @ x
        y = self._row_dual if self._row_dual is not None else np.zeros(model.num_row)
        z = self._col_dual if self._col_dual is not None else np.zeros(model.num_col)
        return InteriorSolution(
            x=x,
            xl=x - model.col_lb,
            xu=model.col_ub - x,
            slack=model.rhs - activity,
            y=y,
            zl=np.maximum(z, 0.0),
            zu=np.maximum(-z, 0.0),
        )

    def _basis(self, x, activity):
        """
        Basis with exactly ``num_row`` basic entries.

        Columns and row logicals are ranked by their distance from the
        nearest bound, ties broken by the smallest absolute dual, and the
        first ``num_row`` become basic. Distances within the feasibility
        tolerance count as zero.
        """
        model = self._model
        n = model.num_col
        tol = float(self._settings.get('ipm_feasibility_tol', 1e-7))
        lb, ub = model.col_lb, model.col_ub

        col_gap = np.minimum(x - lb, ub - x)
        ctype = np.asarray(model.constraint_type)
        row_gap = np.where(ctype == '=', 0.0, np.abs(activity - model.rhs))
        gap = np.concatenate((col_gap, row_gap))
        gap[gap <= tol] = 0.0
        dual = np.abs(np.concatenate((self._col_dual, self._row_dual)))

        order = np.lexsort((dual, -gap))
        basic = np.zeros(len(gap), dtype=bool)
        basic[order[:model.num_row]] = True

        # Nonbasic columns sit at their nearer finite bound
        col_status = np.full(n, BasisCode.SUPERBASIC, dtype=np.int64)
        near_lb = np.isfinite(lb) & (x - lb <= ub - x)
        near_ub = np.isfinite(ub) & ~near_lb
        col_status[near_lb] = BasisCode.NONBASIC_LB
        col_status[near_ub] = BasisCode.NONBASIC_UB
        col_status[basic[:n]] = BasisCode.BASIC

        row_status = np.where(basic[n:], BasisCode.BASIC, ROW_NONBASIC).astype(np.int64)
        return col_status, row_status

    def get_basic_solution(self) -> BasicSolution:
        if self._info.status_crossover not in (PhaseStatus.OPTIMAL, PhaseStatus.IMPRECISE):
            raise RuntimeError("Cannot get basic solution: crossover did not finish")
        x = self._x()
        activity = self._model.to_csc() @ x
        col_status, row_status = self._basis(x, activity)

        return BasicSolution(
            col_value=x,
            col_dual=self._col_dual,
            row_value=activity,
            row_dual=self._row_dual,
            col_status=col_status,
            row_status=row_status,
        )
