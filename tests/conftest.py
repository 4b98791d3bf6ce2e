import numpy as np
import pytest

from ipmbridge import LinearProgram, ObjSense
from ipmbridge.session import (
    BasicSolution,
    BasisCode,
    InteriorSolution,
    PhaseStatus,
    SolveStatus,
    SolverInfo,
    SolverSession,
)


class ScriptedSession(SolverSession):
    """Session double that reports a fixed status tuple without solving anything."""

    def __init__(self, status=SolveStatus.SOLVED, errflag=0,
                 status_ipm=PhaseStatus.OPTIMAL, status_crossover=PhaseStatus.OPTIMAL,
                 iterations=7, basic=None):
        self.status = status
        self.errflag = errflag
        self.status_ipm = status_ipm
        self.status_crossover = status_crossover
        self.iterations = iterations
        self.basic = basic
        self.settings = None
        self.model = None
        self.calls = []

    def configure(self, settings):
        self.calls.append("configure")
        self.settings = settings

    def solve(self, model):
        self.calls.append("solve")
        self.model = model
        return self.status

    def get_info(self):
        self.calls.append("get_info")
        return SolverInfo(
            status=self.status,
            errflag=self.errflag,
            status_ipm=self.status_ipm,
            status_crossover=self.status_crossover,
            iter=self.iterations,
        )

    def get_interior_solution(self):
        self.calls.append("get_interior_solution")
        n, m = self.model.num_col, self.model.num_row
        return InteriorSolution(
            x=np.arange(n, dtype=float),
            xl=np.zeros(n), xu=np.zeros(n),
            slack=np.zeros(m), y=np.zeros(m),
            zl=np.zeros(n), zu=np.zeros(n),
        )

    def get_basic_solution(self):
        self.calls.append("get_basic_solution")
        if self.basic is not None:
            return self.basic(self.model)
        return all_basic_solution(self.model)


def all_basic_solution(model, col_value=None):
    n, m = model.num_col, model.num_row
    return BasicSolution(
        col_value=np.zeros(n) if col_value is None else np.asarray(col_value, dtype=float),
        col_dual=np.zeros(n),
        row_value=np.zeros(m),
        row_dual=np.zeros(m),
        col_status=np.full(n, int(BasisCode.BASIC)),
        row_status=np.full(m, int(BasisCode.BASIC)),
    )


def make_mixed_lp(sense=ObjSense.MINIMIZE):
    """
    Five rows covering every bound combination:
        row 0: [5, 5]       equality
        row 1: [2, 10]      boxed
        row 2: [-inf, 7]    upper only
        row 3: [-inf, inf]  free
        row 4: [3, inf]     lower only
    """
    A = np.array([
        [1.0, 2.0],
        [3.0, 4.0],
        [5.0, 6.0],
        [7.0, 8.0],
        [9.0, 10.0],
    ])
    return LinearProgram.from_arrays(
        A,
        row_lower=np.array([5.0, 2.0, -np.inf, -np.inf, 3.0]),
        row_upper=np.array([5.0, 10.0, 7.0, np.inf, np.inf]),
        col_lower=np.array([0.0, -1.0]),
        col_upper=np.array([np.inf, 4.0]),
        cost=np.array([1.0, -2.0]),
        sense=sense,
    )


@pytest.fixture
def mixed_lp():
    return make_mixed_lp()


@pytest.fixture
def inequality_lp():
    """LP whose rows all have a single finite bound."""
    A = np.array([
        [1.0, 1.0, 0.0],
        [0.0, 2.0, 1.0],
        [1.0, 0.0, 3.0],
    ])
    return LinearProgram.from_arrays(
        A,
        row_lower=np.array([1.0, -np.inf, 4.0]),
        row_upper=np.array([np.inf, 8.0, 4.0]),
        col_lower=np.zeros(3),
        col_upper=np.full(3, np.inf),
        cost=np.array([1.0, 2.0, 3.0]),
    )
