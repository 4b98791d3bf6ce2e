import math

from ipmbridge import Parameters


def test_defaults():
    param = Parameters()

    assert param.primal_feasibility_tolerance == 1e-7
    assert param.dual_feasibility_tolerance == 1e-7
    assert math.isinf(param.time_limit)
    assert param.ipm_iteration_limit == 2147483647
    assert param.run_crossover


def test_round_trip_through_dict():
    param = Parameters()
    param.time_limit = 30.0
    param.ipm_iteration_limit = 200

    restored = Parameters.from_dict(param.to_dict())

    assert restored.to_dict() == param.to_dict()


def test_from_dict_ignores_unknown_keys():
    param = Parameters.from_dict({'time_limit': 5.0, 'device_number': 2})

    assert param.time_limit == 5.0
    assert not hasattr(param, 'device_number')


def test_solver_settings_use_given_budget():
    param = Parameters()
    param.run_crossover = False

    settings = param.to_solver_settings(-1.5)

    assert settings['time_limit'] == -1.5
    assert settings['crossover'] is False
    assert settings['ipm_maxiter'] == param.ipm_iteration_limit
