"""
Mapping of a standard-form basic solution back onto the original LP
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import List, NamedTuple

import numpy as np

from .model import LinearProgram, StandardFormModel
from .session import BasicSolution, BasisCode
from .transform import RowTag


class BasisStatus(IntEnum):
    """Role of a column or row in a basic solution"""
    LOWER = 0
    BASIC = 1
    UPPER = 2
    ZERO = 3
    NONBASIC = 4


_COL_BASIS = {
    BasisCode.BASIC: BasisStatus.BASIC,
    BasisCode.NONBASIC_LB: BasisStatus.LOWER,
    BasisCode.NONBASIC_UB: BasisStatus.UPPER,
    BasisCode.SUPERBASIC: BasisStatus.ZERO,
}

# Bound a nonbasic row sits at, by constraint type
_NONBASIC_ROW = {
    '>': BasisStatus.LOWER,
    '<': BasisStatus.UPPER,
}


@dataclass
class FinalSolution:
    """Primal/dual values and basis of every original column and row"""
    col_value: np.ndarray
    col_dual: np.ndarray
    row_value: np.ndarray
    row_dual: np.ndarray
    col_basis: List[BasisStatus]
    row_basis: List[BasisStatus]


class Infeasibilities(NamedTuple):
    """Aggregate primal and dual infeasibility of a solution"""
    num_primal: int
    max_primal: float
    sum_primal: float
    num_dual: int
    max_dual: float
    sum_dual: float


def _col_basis(code) -> BasisStatus:
    try:
        return _COL_BASIS[BasisCode(int(code))]
    except (KeyError, ValueError):
        raise ValueError(f"unrecognised column basis code {code}") from None


def _row_basis(code, constraint_type, dual, sense) -> BasisStatus:
    if int(code) == BasisCode.BASIC:
        return BasisStatus.BASIC
    if constraint_type == '=':
        return BasisStatus.LOWER if sense * dual >= 0 else BasisStatus.UPPER
    return _NONBASIC_ROW[constraint_type]


def map_basic_solution(lp: LinearProgram, model: StandardFormModel,
                       basic: BasicSolution) -> FinalSolution:
    """
    Rebuild the original-space solution from a standard-form basic solution.

    Columns pass through index for index. A free row gets value and dual zero
    and is basic. A row with a slack column takes its value and basis status
    from the slack column; the slack enters its row with coefficient -1, so
    the row activity equals the slack value. Every other row copies its
    reduced row. Duals are reported in the sense of the original LP: the
    solver minimizes the sense-scaled cost, so its duals are scaled back.

    Parameters
    ----------
    lp : LinearProgram
        The LP the standard-form model was built from
    model : StandardFormModel
        Result of build_standard_form(lp)
    basic : BasicSolution
        Basic solution reported by the solver for ``model``

    Returns
    -------
    FinalSolution
    """
    n = lp.num_col
    sense = int(lp.sense)
    col_status = np.asarray(basic.col_status)
    row_status = np.asarray(basic.row_status)

    col_value = np.array(basic.col_value[:n], dtype=np.float64)
    col_dual = sense * np.array(basic.col_dual[:n], dtype=np.float64)
    col_basis = [_col_basis(code) for code in col_status[:n]]

    row_value = np.zeros(lp.num_row, dtype=np.float64)
    row_dual = np.zeros(lp.num_row, dtype=np.float64)
    retained = model.reduced_row >= 0
    row_value[retained] = np.asarray(basic.row_value)[model.reduced_row[retained]]
    row_dual[retained] = sense * np.asarray(basic.row_dual)[model.reduced_row[retained]]

    slack_cols = n + np.arange(model.num_slack)
    row_value[model.slack_rows] = np.asarray(basic.col_value)[slack_cols]

    row_basis = []
    for row in range(lp.num_row):
        if model.row_tags[row] == RowTag.FREE:
            row_basis.append(BasisStatus.BASIC)
        elif model.slack_of_row[row] >= 0:
            row_basis.append(_col_basis(col_status[n + model.slack_of_row[row]]))
        else:
            reduced = model.reduced_row[row]
            row_basis.append(_row_basis(row_status[reduced], model.constraint_type[reduced],
                                        row_dual[row], sense))

    return FinalSolution(
        col_value=col_value,
        col_dual=col_dual,
        row_value=row_value,
        row_dual=row_dual,
        col_basis=col_basis,
        row_basis=row_basis,
    )


def compute_infeasibilities(lp: LinearProgram, solution: FinalSolution,
                            primal_feasibility_tolerance: float,
                            dual_feasibility_tolerance: float) -> Infeasibilities:
    """
    Primal and dual infeasibilities of an original-space solution.

    A value outside its bounds is primal infeasible by the distance to the
    nearest bound. A dual value is infeasible by its wrong-signed part when
    its column or row is nonbasic at a bound, by its magnitude otherwise, and
    never when the bounds are equal. Counts include only entries above the
    tolerance; max and sum cover all entries.
    """
    lower = np.concatenate((lp.col_lower, lp.row_lower))
    upper = np.concatenate((lp.col_upper, lp.row_upper))
    value = np.concatenate((solution.col_value, solution.row_value))
    primal = np.maximum(np.maximum(lower - value, value - upper), 0.0)

    dual = int(lp.sense) * np.concatenate((solution.col_dual, solution.row_dual))
    status = np.array([int(s) for s in solution.col_basis + solution.row_basis], dtype=np.int64)
    at_lower = status == BasisStatus.LOWER
    at_upper = status == BasisStatus.UPPER
    dual_infeas = np.where(at_lower, np.maximum(-dual, 0.0),
                           np.where(at_upper, np.maximum(dual, 0.0), np.abs(dual)))
    dual_infeas[lower == upper] = 0.0

    return Infeasibilities(
        num_primal=int(np.count_nonzero(primal > primal_feasibility_tolerance)),
        max_primal=float(primal.max(initial=0.0)),
        sum_primal=float(primal.sum()),
        num_dual=int(np.count_nonzero(dual_infeas > dual_feasibility_tolerance)),
        max_dual=float(dual_infeas.max(initial=0.0)),
        sum_dual=float(dual_infeas.sum()),
    )
