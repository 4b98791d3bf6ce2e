"""
Conversion of a general-form LP into interior-point standard form

For each row with both a finite lower and a finite upper bound one slack
column is introduced, and each free row is dropped:

    lower <= a'x <= upper    becomes    a'x - s = 0,  lower <= s <= upper

so the transformed model may have more columns and fewer rows than the LP it
was built from. Every other row keeps its single finite bound as right-hand
side with a ``'>'``, ``'<'`` or ``'='`` constraint type.
"""
import logging
from enum import IntEnum

import numpy as np

from .model import LinearProgram, StandardFormModel

_LOGGER = logging.getLogger(__name__)


class RowTag(IntEnum):
    """How a row is treated in standard form, decided from its bound pair"""
    FREE = 0
    LOWER = 1
    UPPER = 2
    EQUALITY = 3
    BOXED = 4


# Constraint type character and right-hand-side source for every retained tag
_ROW_TREATMENT = {
    RowTag.LOWER: ('>', 'lower'),
    RowTag.UPPER: ('<', 'upper'),
    RowTag.EQUALITY: ('=', 'upper'),
    RowTag.BOXED: ('=', None),
}


def tag_rows(row_lower: np.ndarray, row_upper: np.ndarray) -> np.ndarray:
    """
    Tag every row with its RowTag.

    Parameters
    ----------
    row_lower, row_upper : np.ndarray
        Row bounds, infinite entries meaning "no bound"

    Returns
    -------
    np.ndarray
        Array of RowTag values (int8), one per row
    """
    has_lower = row_lower > -np.inf
    has_upper = row_upper < np.inf

    tags = np.full(len(row_lower), RowTag.FREE, dtype=np.int8)
    tags[has_lower & ~has_upper] = RowTag.LOWER
    tags[~has_lower & has_upper] = RowTag.UPPER
    both = has_lower & has_upper
    tags[both] = RowTag.BOXED
    tags[both & (row_lower == row_upper)] = RowTag.EQUALITY
    return tags


def build_standard_form(lp: LinearProgram) -> StandardFormModel:
    """
    Build the standard-form model for an LP.

    The LP is only read. Retained rows keep their relative order, slack
    columns follow the original columns in the order of their rows.

    Parameters
    ----------
    lp : LinearProgram
        Model to transform

    Returns
    -------
    StandardFormModel
    """
    tags = tag_rows(lp.row_lower, lp.row_upper)

    # Compaction map: original row -> reduced row, -1 for free rows
    retained = tags != RowTag.FREE
    num_row = int(np.count_nonzero(retained))
    reduced_row = np.full(lp.num_row, -1, dtype=np.int64)
    reduced_row[retained] = np.arange(num_row, dtype=np.int64)

    slack_rows = np.flatnonzero(tags == RowTag.BOXED).astype(np.int64)
    num_slack = len(slack_rows)
    slack_of_row = np.full(lp.num_row, -1, dtype=np.int64)
    slack_of_row[slack_rows] = np.arange(num_slack, dtype=np.int64)
    num_col = lp.num_col + num_slack

    rhs, constraint_type = _row_rhs_and_type(lp, tags[retained], retained)

    # Nonzeros in free rows are dropped; column starts shift accordingly
    keep = retained[lp.a_index]
    kept_before = np.concatenate(([0], np.cumsum(keep, dtype=np.int64)))
    num_kept = int(kept_before[-1])

    a_start = np.empty(num_col + 1, dtype=np.int64)
    a_start[:lp.num_col + 1] = kept_before[lp.a_start]
    a_start[lp.num_col + 1:] = num_kept + np.arange(1, num_slack + 1, dtype=np.int64)

    a_index = np.empty(num_kept + num_slack, dtype=np.int64)
    a_value = np.empty(num_kept + num_slack, dtype=np.float64)
    a_index[:num_kept] = reduced_row[lp.a_index[keep]]
    a_value[:num_kept] = lp.a_value[keep]
    a_index[num_kept:] = reduced_row[slack_rows]
    a_value[num_kept:] = -1.0

    col_lb = np.concatenate((lp.col_lower, lp.row_lower[slack_rows]))
    col_ub = np.concatenate((lp.col_upper, lp.row_upper[slack_rows]))
    obj = np.concatenate((int(lp.sense) * lp.col_cost, np.zeros(num_slack)))

    _LOGGER.debug(
        "IPM model has %d columns, %d rows and %d nonzeros (%d slack columns, %d free rows dropped)",
        num_col, num_row, len(a_index), num_slack, lp.num_row - num_row,
    )

    return StandardFormModel(
        num_col=num_col,
        num_row=num_row,
        obj=obj,
        col_lb=col_lb,
        col_ub=col_ub,
        a_start=a_start,
        a_index=a_index,
        a_value=a_value,
        rhs=rhs,
        constraint_type=constraint_type,
        row_tags=tags,
        reduced_row=reduced_row,
        slack_rows=slack_rows,
        slack_of_row=slack_of_row,
    )


def _row_rhs_and_type(lp, kept_tags, retained):
    lower = lp.row_lower[retained]
    upper = lp.row_upper[retained]

    rhs = np.zeros(len(kept_tags), dtype=np.float64)
    constraint_type = np.empty(len(kept_tags), dtype='U1')
    for tag, (ctype, source) in _ROW_TREATMENT.items():
        rows = kept_tags == tag
        constraint_type[rows] = ctype
        if source == 'lower':
            rhs[rows] = lower[rows]
        elif source == 'upper':
            rhs[rows] = upper[rows]
    return rhs, constraint_type
