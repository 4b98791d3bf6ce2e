"""
ipmbridge Python Package

Bridge between general-form linear programs and interior-point solvers that
accept only equality/inequality rows, with translation of the solver status
and solution back onto the original model.
"""

from .solver import IPMSolver, solve
from .parameters import Parameters
from .results import Results, ModelStatus
from .model import LinearProgram, StandardFormModel, ObjSense
from .transform import RowTag, tag_rows, build_standard_form
from .status import Outcome, Severity, InvalidInputKind, Classification, classify, translate
from .mapping import BasisStatus, FinalSolution, Infeasibilities, map_basic_solution, compute_infeasibilities
from .session import (
    SolverSession, SolverInfo, InteriorSolution, BasicSolution,
    SolveStatus, PhaseStatus, ErrorFlag, BasisCode,
)

__version__ = "0.1.0"

__all__ = [
    'IPMSolver',
    'solve',
    'Parameters',
    'Results',
    'ModelStatus',
    'LinearProgram',
    'StandardFormModel',
    'ObjSense',
    '__version__',
    # Standard form
    'RowTag',
    'tag_rows',
    'build_standard_form',
    # Status translation
    'Outcome',
    'Severity',
    'InvalidInputKind',
    'Classification',
    'classify',
    'translate',
    # Solution mapping
    'BasisStatus',
    'FinalSolution',
    'Infeasibilities',
    'map_basic_solution',
    'compute_infeasibilities',
    # Solver capability
    'SolverSession',
    'SolverInfo',
    'InteriorSolution',
    'BasicSolution',
    'SolveStatus',
    'PhaseStatus',
    'ErrorFlag',
    'BasisCode',
]
