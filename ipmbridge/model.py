"""
Model classes for ipmbridge
"""
import numpy as np
from scipy import sparse
from enum import IntEnum
from typing import Union


def _ensure_contiguous_int64(arr):
    """Ensure array is contiguous int64"""
    if not isinstance(arr, np.ndarray):
        arr = np.array(arr, dtype=np.int64)
    if arr.dtype != np.int64:
        arr = arr.astype(np.int64)
    return np.ascontiguousarray(arr)


def _ensure_contiguous_float64(arr):
    """Ensure array is contiguous float64"""
    if not isinstance(arr, np.ndarray):
        arr = np.array(arr, dtype=np.float64)
    if arr.dtype != np.float64:
        arr = arr.astype(np.float64)
    return np.ascontiguousarray(arr)


class ObjSense(IntEnum):
    """Optimization sense, used as a multiplier on the cost vector"""
    MINIMIZE = 1
    MAXIMIZE = -1


class LinearProgram:
    """
    General-form LP handed to the interior-point bridge.

    The model represents an LP of the form:
        minimize (or maximize)  c'*x + offset
        subject to              row_lower <= A*x <= row_upper
                                col_lower <= x <= col_upper

    The constraint matrix is held column-major (start/index/value arrays).
    Infinite bounds are given as ``-np.inf``/``np.inf``. All arrays are copied
    on construction; the bridge never modifies a LinearProgram.

    Attributes
    ----------
    num_col : int
        Number of variables
    num_row : int
        Number of constraints
    sense : ObjSense
        Optimization sense
    col_cost : np.ndarray
        Objective coefficients (length num_col)
    col_lower, col_upper : np.ndarray
        Variable bounds (length num_col)
    row_lower, row_upper : np.ndarray
        Constraint bounds (length num_row)
    a_start : np.ndarray
        Column starts (length num_col + 1)
    a_index : np.ndarray
        Row index of each nonzero
    a_value : np.ndarray
        Value of each nonzero
    offset : float
        Objective constant term

    Examples
    --------
    >>> import numpy as np
    >>> from ipmbridge import LinearProgram, ObjSense
    >>>
    >>> A = np.array([[1.0, 2.0], [3.0, 1.0]])
    >>> lp = LinearProgram.from_arrays(
    ...     A,
    ...     row_lower=np.array([-np.inf, 2.0]),
    ...     row_upper=np.array([10.0, 12.0]),
    ...     col_lower=np.zeros(2),
    ...     col_upper=np.full(2, np.inf),
    ...     cost=np.array([3.0, 5.0]),
    ...     sense=ObjSense.MAXIMIZE,
    ... )
    >>> print(f"LP: {lp.num_row} rows, {lp.num_col} columns")
    """

    def __init__(
        self,
        num_col: int,
        num_row: int,
        col_cost,
        col_lower,
        col_upper,
        row_lower,
        row_upper,
        a_start,
        a_index,
        a_value,
        sense: Union[ObjSense, int] = ObjSense.MINIMIZE,
        offset: float = 0.0,
    ):
        self.num_col = int(num_col)
        self.num_row = int(num_row)
        self.sense = ObjSense(sense)
        self.offset = float(offset)

        self.col_cost = _ensure_contiguous_float64(col_cost).copy()
        self.col_lower = _ensure_contiguous_float64(col_lower).copy()
        self.col_upper = _ensure_contiguous_float64(col_upper).copy()
        self.row_lower = _ensure_contiguous_float64(row_lower).copy()
        self.row_upper = _ensure_contiguous_float64(row_upper).copy()
        self.a_start = _ensure_contiguous_int64(a_start).copy()
        self.a_index = _ensure_contiguous_int64(a_index).copy()
        self.a_value = _ensure_contiguous_float64(a_value).copy()

        self._validate()

    def _validate(self):
        n, m = self.num_col, self.num_row
        if n < 0 or m < 0:
            raise ValueError("num_col and num_row must be non-negative")
        if len(self.col_cost) != n or len(self.col_lower) != n or len(self.col_upper) != n:
            raise ValueError(f"col_cost, col_lower and col_upper must have length {n} (number of columns)")
        if len(self.row_lower) != m or len(self.row_upper) != m:
            raise ValueError(f"row_lower and row_upper must have length {m} (number of rows)")
        if len(self.a_start) != n + 1:
            raise ValueError(f"a_start must have length {n + 1}")
        if self.a_start[0] != 0 or np.any(np.diff(self.a_start) < 0):
            raise ValueError("a_start must start at 0 and be non-decreasing")
        nnz = int(self.a_start[-1])
        if len(self.a_index) != nnz or len(self.a_value) != nnz:
            raise ValueError(f"a_index and a_value must have length {nnz} (number of nonzeros)")
        if nnz and (self.a_index.min() < 0 or self.a_index.max() >= m):
            raise ValueError(f"a_index entries must lie in [0, {m})")

    @property
    def num_nz(self) -> int:
        """Number of matrix nonzeros"""
        return int(self.a_start[-1])

    @staticmethod
    def from_arrays(
        A: Union[np.ndarray, sparse.spmatrix],
        row_lower: np.ndarray,
        row_upper: np.ndarray,
        col_lower: np.ndarray,
        col_upper: np.ndarray,
        cost: np.ndarray,
        sense: Union[ObjSense, int] = ObjSense.MINIMIZE,
        offset: float = 0.0,
    ) -> 'LinearProgram':
        """
        Create an LP from a constraint matrix and bound arrays.

        Parameters
        ----------
        A : np.ndarray or scipy.sparse matrix
            Constraint matrix (m x n)
        row_lower, row_upper : np.ndarray
            Constraint bounds (length m)
        col_lower, col_upper : np.ndarray
            Variable bounds (length n)
        cost : np.ndarray
            Objective coefficients (length n)
        sense : ObjSense, optional
            Optimization sense (default: minimize)
        offset : float, optional
            Objective constant term

        Returns
        -------
        LinearProgram
        """
        if sparse.issparse(A):
            A_csc = sparse.csc_matrix(A)
        elif isinstance(A, np.ndarray):
            A_csc = sparse.csc_matrix(np.atleast_2d(A))
        else:
            raise TypeError("A must be a numpy array or scipy sparse matrix")
        A_csc.sort_indices()

        m, n = A_csc.shape
        return LinearProgram(
            num_col=n,
            num_row=m,
            col_cost=cost,
            col_lower=col_lower,
            col_upper=col_upper,
            row_lower=row_lower,
            row_upper=row_upper,
            a_start=A_csc.indptr,
            a_index=A_csc.indices,
            a_value=A_csc.data,
            sense=sense,
            offset=offset,
        )

    def to_csc(self) -> sparse.csc_matrix:
        """Constraint matrix as a scipy CSC matrix"""
        return sparse.csc_matrix(
            (self.a_value, self.a_index, self.a_start),
            shape=(self.num_row, self.num_col),
        )

    def __repr__(self):
        return (f"<ipmbridge.LinearProgram num_row={self.num_row} "
                f"num_col={self.num_col} nnz={self.num_nz} sense={self.sense.name}>")


class StandardFormModel:
    """
    LP in the restricted form accepted by the interior-point solver.

        minimize    obj'*x
        subject to  A*x (constraint_type) rhs
                    col_lb <= x <= col_ub

    where each constraint type is one of ``'>'``, ``'<'`` or ``'='``.
    Produced by :func:`ipmbridge.transform.build_standard_form`; the row
    bookkeeping arrays let a solution be mapped back onto the original LP.

    Attributes
    ----------
    num_col, num_row : int
        Dimensions after adding slack columns and dropping free rows
    obj, col_lb, col_ub : np.ndarray
        Cost and bounds (length num_col)
    a_start, a_index, a_value : np.ndarray
        Column-major matrix
    rhs : np.ndarray
        Right-hand side (length num_row)
    constraint_type : np.ndarray
        Constraint type characters (length num_row)
    row_tags : np.ndarray
        RowTag value of every original row
    reduced_row : np.ndarray
        Reduced index of every original row, -1 for free rows
    slack_rows : np.ndarray
        Original row owning each slack column
    slack_of_row : np.ndarray
        Slack column (offset from the first slack) of every original row, or -1
    """

    def __init__(self, num_col, num_row, obj, col_lb, col_ub, a_start, a_index,
                 a_value, rhs, constraint_type, row_tags, reduced_row,
                 slack_rows, slack_of_row):
        self.num_col = num_col
        self.num_row = num_row
        self.obj = obj
        self.col_lb = col_lb
        self.col_ub = col_ub
        self.a_start = a_start
        self.a_index = a_index
        self.a_value = a_value
        self.rhs = rhs
        self.constraint_type = constraint_type
        self.row_tags = row_tags
        self.reduced_row = reduced_row
        self.slack_rows = slack_rows
        self.slack_of_row = slack_of_row

    @property
    def num_slack(self) -> int:
        return len(self.slack_rows)

    @property
    def num_nz(self) -> int:
        return int(self.a_start[-1])

    def to_csc(self) -> sparse.csc_matrix:
        """Constraint matrix as a scipy CSC matrix"""
        return sparse.csc_matrix(
            (self.a_value, self.a_index, self.a_start),
            shape=(self.num_row, self.num_col),
        )

    def __repr__(self):
        return (f"<ipmbridge.StandardFormModel num_row={self.num_row} "
                f"num_col={self.num_col} nnz={self.num_nz} "
                f"slacks={self.num_slack}>")

