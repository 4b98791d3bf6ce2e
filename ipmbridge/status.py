"""
Classification of interior-point solver status codes

A solve reports four codes: the overall solve status, an error flag, and the
status of the interior-point and crossover phases. :func:`classify` maps
them onto one :class:`Outcome` by walking an ordered rule table; the first
rule whose predicate holds decides the outcome. :func:`translate` does the
same and logs one message at the outcome's severity.
"""
import logging
from collections import namedtuple
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

from .session import ErrorFlag, PhaseStatus, SolveStatus, SolverInfo

_LOGGER = logging.getLogger(__name__)


class Severity(IntEnum):
    """Severity of a classification message, as a logging level"""
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


class Outcome(Enum):
    """Overall result of one interior-point solve"""
    OPTIMAL = 'optimal'
    IMPRECISE = 'imprecise'
    PRIMAL_INFEASIBLE = 'primal_infeasible'
    UNBOUNDED = 'unbounded'
    TIME_LIMIT = 'time_limit'
    ITERATION_LIMIT = 'iteration_limit'
    UNRESOLVED = 'unresolved'
    INVALID_INPUT = 'invalid_input'
    OUT_OF_MEMORY = 'out_of_memory'
    INTERNAL_ERROR = 'internal_error'
    FAILED = 'failed'
    DEBUG = 'debug'
    UNRECOGNISED = 'unrecognised'

    @property
    def fatal(self) -> bool:
        """True if no usable result can follow this outcome"""
        return self in _FATAL_OUTCOMES


_FATAL_OUTCOMES = frozenset({
    Outcome.INVALID_INPUT,
    Outcome.OUT_OF_MEMORY,
    Outcome.INTERNAL_ERROR,
    Outcome.FAILED,
    Outcome.DEBUG,
    Outcome.UNRECOGNISED,
})


class InvalidInputKind(Enum):
    """Reason the solver rejected its input"""
    ARGUMENT_NULL = 'argument_null'
    INVALID_DIMENSION = 'invalid_dimension'
    INVALID_MATRIX = 'invalid_matrix'
    INVALID_VECTOR = 'invalid_vector'
    INVALID_BASIS = 'invalid_basis'
    UNKNOWN = 'unknown'


_INVALID_INPUT_KINDS = {
    ErrorFlag.ARGUMENT_NULL: InvalidInputKind.ARGUMENT_NULL,
    ErrorFlag.INVALID_DIMENSION: InvalidInputKind.INVALID_DIMENSION,
    ErrorFlag.INVALID_MATRIX: InvalidInputKind.INVALID_MATRIX,
    ErrorFlag.INVALID_VECTOR: InvalidInputKind.INVALID_VECTOR,
    ErrorFlag.INVALID_BASIS: InvalidInputKind.INVALID_BASIS,
}

_PHASE_NAMES = ('IPM', 'Crossover')


class SolveState(namedtuple('SolveState', ['solve_status', 'errflag', 'status_ipm', 'status_crossover'])):
    """The four codes a classification is a function of"""
    __slots__ = ()

    @classmethod
    def from_info(cls, info: SolverInfo) -> 'SolveState':
        return cls(int(info.status), int(info.errflag),
                   int(info.status_ipm), int(info.status_crossover))

    @property
    def phases(self):
        return (self.status_ipm, self.status_crossover)

    def any_phase(self, status: PhaseStatus) -> bool:
        return status in self.phases


@dataclass(frozen=True)
class Classification:
    """
    Result of classifying a SolveState.

    Attributes
    ----------
    outcome : Outcome
        Overall outcome
    severity : Severity
        Severity of the message
    message : str
        Description of the phase and reason
    rule : str
        Name of the rule that fired
    invalid_input_kind : InvalidInputKind, optional
        Set for Outcome.INVALID_INPUT
    code : int, optional
        Raw code carried by internal-error and unrecognised outcomes
    cleanup_required : bool
        Advisory flag raised when crossover was imprecise
    """
    outcome: Outcome
    severity: Severity
    message: str
    rule: str
    invalid_input_kind: Optional[InvalidInputKind] = None
    code: Optional[int] = None
    cleanup_required: bool = False

    @property
    def fatal(self) -> bool:
        return self.outcome.fatal

    @property
    def has_solution(self) -> bool:
        """True if a basic solution can be extracted"""
        return self.outcome in (Outcome.OPTIMAL, Outcome.IMPRECISE)


Rule = namedtuple('Rule', ['name', 'matches', 'build'])


def _phase_name(state: SolveState, statuses) -> str:
    for name, status in zip(_PHASE_NAMES, state.phases):
        if status in statuses:
            return name
    return _PHASE_NAMES[0]


_KNOWN_PHASE_CODES = frozenset(int(status) for status in PhaseStatus)


def _is_known_phase_status(code: int) -> bool:
    return code in _KNOWN_PHASE_CODES


def _invalid_input(state):
    kind = _INVALID_INPUT_KINDS.get(state.errflag, InvalidInputKind.UNKNOWN)
    return Classification(
        Outcome.INVALID_INPUT, Severity.ERROR,
        f"IPM solve: invalid input - {kind.value.replace('_', ' ')}",
        'invalid_input', invalid_input_kind=kind, code=state.errflag)


def _out_of_memory(state):
    return Classification(Outcome.OUT_OF_MEMORY, Severity.ERROR,
                          "IPM solve: out of memory", 'out_of_memory')


def _internal_error(state):
    return Classification(Outcome.INTERNAL_ERROR, Severity.ERROR,
                          f"IPM solve: internal error {state.errflag}",
                          'internal_error', code=state.errflag)


def _unrecognised_solve_status(state):
    return Classification(Outcome.UNRECOGNISED, Severity.ERROR,
                          f"IPM solve: unrecognised solve status = {state.solve_status}",
                          'unrecognised_solve_status', code=state.solve_status)


def _phase_error_matches(state):
    return any(status in (PhaseStatus.FAILED, PhaseStatus.DEBUG) or not _is_known_phase_status(status)
               for status in state.phases)


def _phase_error(state):
    for name, status in zip(_PHASE_NAMES, state.phases):
        if status == PhaseStatus.FAILED:
            return Classification(Outcome.FAILED, Severity.ERROR,
                                  f"IPM solve: {name} failed", 'phase_error', code=status)
        if status == PhaseStatus.DEBUG:
            return Classification(Outcome.DEBUG, Severity.ERROR,
                                  f"IPM solve: {name} debug", 'phase_error', code=status)
        if not _is_known_phase_status(status):
            return Classification(Outcome.UNRECOGNISED, Severity.ERROR,
                                  f"IPM solve: {name} unrecognised status = {status}",
                                  'phase_error', code=status)
    raise AssertionError("phase error rule fired without a failed phase")


def _stopped_time_limit_matches(state):
    if state.solve_status != SolveStatus.STOPPED:
        return False
    # A stopped solve cannot have proved infeasibility
    assert not state.any_phase(PhaseStatus.PRIMAL_INFEASIBLE)
    assert not state.any_phase(PhaseStatus.DUAL_INFEASIBLE)
    return state.any_phase(PhaseStatus.TIME_LIMIT)


def _time_limit(state):
    name = _phase_name(state, (PhaseStatus.TIME_LIMIT,))
    return Classification(Outcome.TIME_LIMIT, Severity.WARNING,
                          f"IPM solve: {name} reached time limit", 'time_limit')


def _iteration_limit(state):
    # Crossover has no iteration limit
    assert state.status_crossover != PhaseStatus.ITERATION_LIMIT
    return Classification(Outcome.ITERATION_LIMIT, Severity.WARNING,
                          "IPM solve: IPM reached iteration limit", 'iteration_limit')


def _primal_infeasible(state):
    assert not (state.status_crossover == PhaseStatus.PRIMAL_INFEASIBLE
                and state.status_ipm != PhaseStatus.PRIMAL_INFEASIBLE)
    return Classification(Outcome.PRIMAL_INFEASIBLE, Severity.INFO,
                          "IPM solve: IPM primal infeasible", 'primal_infeasible')


def _dual_infeasible(state):
    assert not (state.status_crossover == PhaseStatus.DUAL_INFEASIBLE
                and state.status_ipm != PhaseStatus.DUAL_INFEASIBLE)
    return Classification(Outcome.UNBOUNDED, Severity.INFO,
                          "IPM solve: IPM dual infeasible, model is primal unbounded",
                          'dual_infeasible')


def _crossover_solution(state):
    if state.status_crossover == PhaseStatus.OPTIMAL:
        return Classification(Outcome.OPTIMAL, Severity.INFO,
                              "IPM solve: Crossover optimal", 'crossover_solution')
    return Classification(
        Outcome.IMPRECISE, Severity.WARNING,
        "IPM solve: Crossover imprecise - at least one of the primal and dual "
        "infeasibilities of the basic solution exceeds its tolerance. "
        "Simplex clean-up will be required",
        'crossover_solution', cleanup_required=True)


def _unresolved(state):
    if state.solve_status == SolveStatus.STOPPED:
        reason = "stopped"
    else:
        reason = f"Crossover {PhaseStatus(state.status_crossover).name.lower().replace('_', ' ')}"
    return Classification(Outcome.UNRESOLVED, Severity.WARNING,
                          f"IPM solve: no basic solution available ({reason})", 'unresolved')


def _solved(state):
    return state.solve_status == SolveStatus.SOLVED


def _stopped(state):
    return state.solve_status == SolveStatus.STOPPED


RULES = (
    Rule('invalid_input', lambda s: s.solve_status == SolveStatus.INVALID_INPUT, _invalid_input),
    Rule('out_of_memory', lambda s: s.solve_status == SolveStatus.OUT_OF_MEMORY, _out_of_memory),
    Rule('internal_error', lambda s: s.solve_status == SolveStatus.INTERNAL_ERROR, _internal_error),
    Rule('unrecognised_solve_status', lambda s: not (_solved(s) or _stopped(s)), _unrecognised_solve_status),
    Rule('phase_error', _phase_error_matches, _phase_error),
    Rule('time_limit', _stopped_time_limit_matches, _time_limit),
    Rule('iteration_limit',
         lambda s: _stopped(s) and s.any_phase(PhaseStatus.ITERATION_LIMIT), _iteration_limit),
    Rule('primal_infeasible',
         lambda s: _solved(s) and s.any_phase(PhaseStatus.PRIMAL_INFEASIBLE), _primal_infeasible),
    Rule('dual_infeasible',
         lambda s: _solved(s) and s.any_phase(PhaseStatus.DUAL_INFEASIBLE), _dual_infeasible),
    Rule('crossover_solution',
         lambda s: _solved(s) and s.status_crossover in (PhaseStatus.OPTIMAL, PhaseStatus.IMPRECISE),
         _crossover_solution),
    Rule('unresolved', lambda s: True, _unresolved),
)


def classify(solve_status: int, errflag: int = ErrorFlag.NONE,
             status_ipm: int = PhaseStatus.NOT_RUN,
             status_crossover: int = PhaseStatus.NOT_RUN) -> Classification:
    """
    Classify the status codes of one solve. Has no side effects.

    Parameters
    ----------
    solve_status : int
        SolveStatus code returned by the solve call
    errflag : int
        Error flag from the solver info
    status_ipm, status_crossover : int
        PhaseStatus codes of the two phases

    Returns
    -------
    Classification
    """
    state = SolveState(int(solve_status), int(errflag), int(status_ipm), int(status_crossover))
    return _apply_rules(state, RULES)


def _apply_rules(state: SolveState, rules) -> Classification:
    for rule in rules:
        if rule.matches(state):
            return rule.build(state)
    raise AssertionError(f"no status rule matched {state}")


def translate(solve_status: int, info: SolverInfo,
              logger: Optional[logging.Logger] = None) -> Classification:
    """
    Classify the status of a finished solve and log the result.

    ``solve_status`` is the code returned by the solve call; the phase codes
    and error flag come from ``info``. Exactly one message is logged, at the
    classification's severity.
    """
    state = SolveState.from_info(info)._replace(solve_status=int(solve_status))
    classification = _apply_rules(state, RULES)
    (logger or _LOGGER).log(int(classification.severity), classification.message)
    return classification
