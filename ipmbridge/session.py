"""
Interface to the external interior-point/crossover solver

The bridge never links against a particular solver. It drives any object
implementing :class:`SolverSession`, which receives the standard-form arrays,
runs the interior-point method followed by crossover, and reports status
codes using the integer values below.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict

import numpy as np


class SolveStatus(IntEnum):
    """Overall status returned by a solve call"""
    SOLVED = 1000
    INVALID_INPUT = 1002
    OUT_OF_MEMORY = 1003
    INTERNAL_ERROR = 1004
    STOPPED = 1005


class PhaseStatus(IntEnum):
    """Status of the interior-point or crossover phase"""
    NOT_RUN = 0
    OPTIMAL = 1
    IMPRECISE = 2
    PRIMAL_INFEASIBLE = 3
    DUAL_INFEASIBLE = 4
    TIME_LIMIT = 5
    ITERATION_LIMIT = 6
    NO_PROGRESS = 7
    FAILED = 8
    DEBUG = 9


class ErrorFlag(IntEnum):
    """Reason attached to an invalid-input solve status"""
    NONE = 0
    ARGUMENT_NULL = 102
    INVALID_DIMENSION = 103
    INVALID_MATRIX = 104
    INVALID_VECTOR = 105
    INVALID_BASIS = 107


class BasisCode(IntEnum):
    """Basis status codes of a basic solution"""
    BASIC = 0
    NONBASIC_LB = -1
    NONBASIC_UB = -2
    SUPERBASIC = -3


# Rows only distinguish basic from nonbasic
ROW_NONBASIC = BasisCode.NONBASIC_LB


@dataclass
class SolverInfo:
    """Status and statistics reported after a solve call"""
    status: int = SolveStatus.INTERNAL_ERROR
    errflag: int = ErrorFlag.NONE
    status_ipm: int = PhaseStatus.NOT_RUN
    status_crossover: int = PhaseStatus.NOT_RUN
    iter: int = 0
    objval: float = 0.0


@dataclass
class InteriorSolution:
    """
    Final interior-point iterate in standard-form space.

    ``x``, ``xl``, ``xu``, ``zl`` and ``zu`` have one entry per standard-form
    column; ``slack`` and ``y`` one entry per standard-form row.
    """
    x: np.ndarray
    xl: np.ndarray
    xu: np.ndarray
    slack: np.ndarray
    y: np.ndarray
    zl: np.ndarray
    zu: np.ndarray


@dataclass
class BasicSolution:
    """
    Vertex solution produced by crossover, in standard-form space.

    ``row_value`` holds the activity ``a'x`` of every standard-form row.
    ``col_status``/``row_status`` hold :class:`BasisCode` values.
    """
    col_value: np.ndarray
    col_dual: np.ndarray
    row_value: np.ndarray
    row_dual: np.ndarray
    col_status: np.ndarray
    row_status: np.ndarray


class SolverSession(ABC):
    """
    One solve against the external interior-point solver.

    A session is configured, solved exactly once, and then queried. The
    interior iterate is available after any solve that returns (except when
    the solver ran out of memory); the basic solution only when crossover
    finished with an optimal or imprecise status.
    """

    @abstractmethod
    def configure(self, settings: Dict[str, Any]) -> None:
        """
        Set solver parameters.

        ``settings`` has the keys ``ipm_feasibility_tol``,
        ``ipm_optimality_tol``, ``time_limit``, ``ipm_maxiter``, ``crossover``
        and ``debug``.
        """

    @abstractmethod
    def solve(self, model) -> int:
        """Run the solver on a StandardFormModel and return its SolveStatus code"""

    @abstractmethod
    def get_info(self) -> SolverInfo:
        """Status codes and statistics of the last solve"""

    @abstractmethod
    def get_interior_solution(self) -> InteriorSolution:
        """Final interior-point iterate"""

    @abstractmethod
    def get_basic_solution(self) -> BasicSolution:
        """Basic solution from crossover"""
