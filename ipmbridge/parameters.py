"""
Parameters class for the interior-point bridge
"""
import math


class Parameters:
    """
    Configuration parameters for an interior-point solve.

    Attributes
    ----------
    primal_feasibility_tolerance : float
        Primal feasibility tolerance handed to the IPM (default: 1e-7)
    dual_feasibility_tolerance : float
        Dual feasibility tolerance handed to the IPM (default: 1e-7)
    time_limit : float
        Overall time limit in seconds; the solver receives what remains of
        it when the solve starts (default: inf)
    ipm_iteration_limit : int
        Maximum number of IPM iterations (default: 2^31 - 1)
    run_crossover : bool
        Run crossover after the IPM to obtain a basic solution (default: True)
    debug : bool
        Ask the solver for its internal consistency checks (default: False)

    Examples
    --------
    >>> param = Parameters()
    >>> param.time_limit = 60.0
    >>> param.primal_feasibility_tolerance = 1e-8
    """

    def __init__(self):
        self.primal_feasibility_tolerance = 1e-7
        self.dual_feasibility_tolerance = 1e-7
        self.time_limit = math.inf
        self.ipm_iteration_limit = 2147483647  # INT32_MAX
        self.run_crossover = True
        self.debug = False

    def __repr__(self):
        return (f"Parameters(primal_feasibility_tolerance={self.primal_feasibility_tolerance}, "
                f"dual_feasibility_tolerance={self.dual_feasibility_tolerance}, "
                f"time_limit={self.time_limit}, "
                f"ipm_iteration_limit={self.ipm_iteration_limit})")

    def to_solver_settings(self, time_budget: float) -> dict:
        """
        Settings handed to SolverSession.configure.

        Parameters
        ----------
        time_budget : float
            Seconds the solver may use. Passed through as given, including
            zero or negative budgets.
        """
        return {
            'ipm_feasibility_tol': self.primal_feasibility_tolerance,
            'ipm_optimality_tol': self.dual_feasibility_tolerance,
            'time_limit': time_budget,
            'ipm_maxiter': self.ipm_iteration_limit,
            'crossover': self.run_crossover,
            'debug': self.debug,
        }

    @classmethod
    def from_dict(cls, d):
        """Create Parameters from dictionary"""
        param = cls()
        for key, value in d.items():
            if hasattr(param, key):
                setattr(param, key, value)
        return param

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'primal_feasibility_tolerance': self.primal_feasibility_tolerance,
            'dual_feasibility_tolerance': self.dual_feasibility_tolerance,
            'time_limit': self.time_limit,
            'ipm_iteration_limit': self.ipm_iteration_limit,
            'run_crossover': self.run_crossover,
            'debug': self.debug,
        }
