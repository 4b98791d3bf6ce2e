import logging

import numpy as np
import pytest

from ipmbridge import (
    BasisStatus,
    IPMSolver,
    LinearProgram,
    ModelStatus,
    ObjSense,
    Parameters,
    build_standard_form,
)
from ipmbridge.highs_session import HighsIpmSession
from ipmbridge.session import BasisCode, PhaseStatus, SolveStatus


def production_lp():
    """
    maximize    3*x + 5*y
    subject to  x <= 4
                2 <= 2*y <= 12
                3*x + 2*y <= 18
                x + y free
                x, y >= 0
    Optimum x = 2, y = 6, objective 36.
    """
    A = np.array([
        [1.0, 0.0],
        [0.0, 2.0],
        [3.0, 2.0],
        [1.0, 1.0],
    ])
    return LinearProgram.from_arrays(
        A,
        row_lower=np.array([-np.inf, 2.0, -np.inf, -np.inf]),
        row_upper=np.array([4.0, 12.0, 18.0, np.inf]),
        col_lower=np.zeros(2),
        col_upper=np.full(2, np.inf),
        cost=np.array([3.0, 5.0]),
        sense=ObjSense.MAXIMIZE,
    )


def test_solves_small_lp_end_to_end():
    lp = production_lp()

    result = IPMSolver(session_factory=HighsIpmSession).solve(lp)

    assert result.model_status == ModelStatus.OPTIMAL
    assert result.objective_value == pytest.approx(36.0, rel=1e-6)
    np.testing.assert_allclose(result.col_value, [2.0, 6.0], atol=1e-6)
    assert result.row_value[1] == pytest.approx(12.0, abs=1e-6)
    assert result.row_value[2] == pytest.approx(18.0, abs=1e-6)
    assert result.row_value[3] == 0.0
    assert result.row_basis[0] == BasisStatus.BASIC
    assert result.row_basis[1] == BasisStatus.UPPER
    assert result.row_basis[2] == BasisStatus.UPPER
    assert result.row_basis[3] == BasisStatus.BASIC
    assert result.infeasibilities.num_primal == 0
    assert result.infeasibilities.num_dual == 0


def test_shadow_prices_in_original_sense():
    result = IPMSolver(session_factory=HighsIpmSession).solve(production_lp())

    # Each extra unit of 3*x + 2*y <= 18 is worth 1, of 2*y <= 12 worth 1.5
    assert result.row_dual[2] == pytest.approx(1.0, abs=1e-6)
    assert result.row_dual[1] == pytest.approx(1.5, abs=1e-6)
    assert result.row_dual[0] == pytest.approx(0.0, abs=1e-6)


def test_infeasible_lp():
    lp = LinearProgram.from_arrays(
        np.array([[1.0]]),
        row_lower=np.array([5.0]),
        row_upper=np.array([np.inf]),
        col_lower=np.array([0.0]),
        col_upper=np.array([1.0]),
        cost=np.array([1.0]),
    )

    result = IPMSolver(session_factory=HighsIpmSession).solve(lp)

    assert result.model_status == ModelStatus.PRIMAL_INFEASIBLE
    assert not result.has_solution()


def test_session_reports_solver_codes():
    model = build_standard_form(production_lp())
    session = HighsIpmSession()
    session.configure({'ipm_feasibility_tol': 1e-8, 'ipm_optimality_tol': 1e-8})

    status = session.solve(model)
    info = session.get_info()

    assert status == SolveStatus.SOLVED
    assert info.status_ipm == PhaseStatus.OPTIMAL
    assert info.status_crossover == PhaseStatus.OPTIMAL
    assert info.objval == pytest.approx(-36.0, rel=1e-6)

    interior = session.get_interior_solution()
    assert len(interior.x) == model.num_col
    assert len(interior.y) == model.num_row


def test_basic_solution_requires_crossover():
    session = HighsIpmSession()

    with pytest.raises(RuntimeError):
        session.get_basic_solution()


def test_exhausted_time_budget_stops_at_time_limit():
    param = Parameters()
    param.time_limit = 1.0

    result = IPMSolver(session_factory=HighsIpmSession).solve(
        production_lp(), param=param, elapsed=lambda: 5.0)

    assert result.model_status == ModelStatus.REACHED_TIME_LIMIT
    assert result.classification.rule == 'time_limit'
    assert not result.has_solution()


def test_exhausted_budget_reports_stop_without_solving():
    model = build_standard_form(production_lp())
    session = HighsIpmSession()
    session.configure({'time_limit': 0.0})

    status = session.solve(model)

    assert status == SolveStatus.STOPPED
    assert session.get_info().status_ipm == PhaseStatus.TIME_LIMIT
    with pytest.raises(RuntimeError):
        session.get_basic_solution()


def count_basic(basic):
    return (int(np.count_nonzero(basic.col_status == BasisCode.BASIC))
            + int(np.count_nonzero(basic.row_status == BasisCode.BASIC)))


def test_basis_has_one_basic_entry_per_row():
    model = build_standard_form(production_lp())
    session = HighsIpmSession()
    session.configure({})
    session.solve(model)

    basic = session.get_basic_solution()

    assert count_basic(basic) == model.num_row


def test_degenerate_vertex_basis_has_one_basic_entry_per_row():
    # min -x0 s.t. x0 + x1 <= 1, x0 <= 1, x >= 0; optimum x = (1, 0) is degenerate
    lp = LinearProgram.from_arrays(
        np.array([[1.0, 1.0], [1.0, 0.0]]),
        row_lower=np.full(2, -np.inf),
        row_upper=np.ones(2),
        col_lower=np.zeros(2),
        col_upper=np.full(2, np.inf),
        cost=np.array([-1.0, 0.0]),
    )
    model = build_standard_form(lp)
    session = HighsIpmSession()
    session.configure({})
    assert session.solve(model) == SolveStatus.SOLVED

    basic = session.get_basic_solution()

    assert count_basic(basic) == model.num_row
    assert basic.col_status[0] == BasisCode.BASIC


def test_ignored_crossover_setting_is_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="ipmbridge")

    HighsIpmSession().configure({'crossover': False})

    assert any("crossover=False" in r.getMessage() for r in caplog.records)
