"""
Results class for interior-point bridge output
"""
import numpy as np
from enum import Enum
from typing import Optional, Dict, Any, List

from .mapping import BasisStatus, Infeasibilities
from .status import Classification


class ModelStatus(Enum):
    """Status of the model after an interior-point solve"""
    NOTSET = 'NOTSET'
    OPTIMAL = 'OPTIMAL'
    PRIMAL_INFEASIBLE = 'PRIMAL_INFEASIBLE'
    PRIMAL_UNBOUNDED = 'PRIMAL_UNBOUNDED'
    REACHED_TIME_LIMIT = 'REACHED_TIME_LIMIT'
    REACHED_ITERATION_LIMIT = 'REACHED_ITERATION_LIMIT'
    SOLVE_ERROR = 'SOLVE_ERROR'


class Results:
    """
    Results of solving an LP with the interior-point bridge.

    Attributes
    ----------
    model_status : ModelStatus
        Status of the model
    objective_value : float
        Objective value of the original LP (set when optimal)
    col_value, col_dual : np.ndarray
        Primal values and reduced costs of the original columns
    row_value, row_dual : np.ndarray
        Activities and duals of the original rows
    col_basis, row_basis : list of BasisStatus
        Basis of the original columns and rows
    interior_x : np.ndarray
        Final interior-point iterate restricted to the original columns
    iteration_count : int
        Number of IPM iterations
    run_time : float
        Time spent in the solve call, in seconds
    cleanup_required : bool
        Crossover was imprecise; the basic solution needs simplex clean-up
    classification : Classification
        How the solver's status codes were interpreted
    infeasibilities : Infeasibilities
        Primal/dual infeasibility of the returned solution

    Methods
    -------
    is_optimal()
        Check if solution is optimal
    to_dict()
        Convert results to dictionary
    """

    def __init__(self):
        self.model_status: ModelStatus = ModelStatus.NOTSET
        self.objective_value: float = 0.0
        self.col_value: Optional[np.ndarray] = None
        self.col_dual: Optional[np.ndarray] = None
        self.row_value: Optional[np.ndarray] = None
        self.row_dual: Optional[np.ndarray] = None
        self.col_basis: Optional[List[BasisStatus]] = None
        self.row_basis: Optional[List[BasisStatus]] = None
        self.interior_x: Optional[np.ndarray] = None
        self.iteration_count: int = 0
        self.run_time: float = 0.0
        self.cleanup_required: bool = False
        self.classification: Optional[Classification] = None
        self.infeasibilities: Optional[Infeasibilities] = None

    def is_optimal(self) -> bool:
        """Check if solution is optimal"""
        return self.model_status == ModelStatus.OPTIMAL

    def is_error(self) -> bool:
        """Check if the solve failed"""
        return self.model_status == ModelStatus.SOLVE_ERROR

    def has_solution(self) -> bool:
        """Check if primal and dual values are available"""
        return self.col_value is not None

    def __repr__(self):
        if self.col_value is not None:
            n_vars = len(self.col_value)
        else:
            n_vars = 0

        return (f"Results(model_status='{self.model_status.value}', "
                f"iteration_count={self.iteration_count}, "
                f"run_time={self.run_time:.3f}s, "
                f"n_vars={n_vars})")

    def __str__(self):
        lines = [
            "IPM Solve Results",
            "=" * 50,
            f"Model status:    {self.model_status.value}",
            f"Objective:       {self.objective_value:.6e}",
            f"Iterations:      {self.iteration_count}",
            f"Time:            {self.run_time:.3f} seconds",
        ]

        if self.classification is not None:
            lines.append(f"Outcome:         {self.classification.outcome.value}")
        if self.cleanup_required:
            lines.append("Clean-up:        required (crossover imprecise)")

        if self.infeasibilities is not None:
            inf = self.infeasibilities
            lines.append(f"Primal infeas:   {inf.num_primal} (max {inf.max_primal:.2e}, sum {inf.sum_primal:.2e})")
            lines.append(f"Dual infeas:     {inf.num_dual} (max {inf.max_dual:.2e}, sum {inf.sum_dual:.2e})")

        if self.col_value is not None:
            lines.append(f"Variables:       {len(self.col_value)}")
            lines.append(f"||x||:           {np.linalg.norm(self.col_value):.6e}")

        if self.row_value is not None:
            lines.append(f"Constraints:     {len(self.row_value)}")

        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert results to dictionary"""
        return {
            'model_status': self.model_status.value,
            'objective_value': self.objective_value,
            'col_value': self.col_value.tolist() if self.col_value is not None else None,
            'col_dual': self.col_dual.tolist() if self.col_dual is not None else None,
            'row_value': self.row_value.tolist() if self.row_value is not None else None,
            'row_dual': self.row_dual.tolist() if self.row_dual is not None else None,
            'col_basis': [s.name for s in self.col_basis] if self.col_basis is not None else None,
            'row_basis': [s.name for s in self.row_basis] if self.row_basis is not None else None,
            'iteration_count': self.iteration_count,
            'run_time': self.run_time,
            'cleanup_required': self.cleanup_required,
            'infeasibilities': self.infeasibilities._asdict() if self.infeasibilities is not None else None,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]):
        """Create Results from dictionary"""
        results = cls()
        for key, value in d.items():
            if value is None:
                continue
            if key in ['col_value', 'col_dual', 'row_value', 'row_dual']:
                setattr(results, key, np.array(value, dtype=np.float64))
            elif key in ['col_basis', 'row_basis']:
                setattr(results, key, [BasisStatus[name] for name in value])
            elif key == 'model_status':
                results.model_status = ModelStatus(value)
            elif key == 'infeasibilities':
                results.infeasibilities = Infeasibilities(**value)
            elif hasattr(results, key):
                setattr(results, key, value)
        return results
