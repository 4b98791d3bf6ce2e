"""
Example: Solving an LP from arrays with ipmbridge

This example builds a general-form LP with a doubly-bounded row and a free
row, shows its interior-point standard form, and solves it.

Problem:
    maximize    3*x1 + 5*x2
    subject to        x1           <= 4
                2 <=       2*x2    <= 12
                    3*x1 + 2*x2    <= 18
                      x1 +   x2       (free)
                 x1, x2 >= 0
"""

import logging

import numpy as np
from scipy import sparse
import ipmbridge


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    print()
    print("=" * 70)
    print("ipmbridge Example: Direct LP from Arrays - Python")
    print("=" * 70)
    print()

    # Constraint matrix in CSC format
    A = sparse.csc_matrix([
        [1.0, 0.0],  # x1 <= 4
        [0.0, 2.0],  # 2 <= 2*x2 <= 12
        [3.0, 2.0],  # 3*x1 + 2*x2 <= 18
        [1.0, 1.0],  # free
    ])

    # Constraint bounds
    row_lower = np.array([-np.inf, 2.0, -np.inf, -np.inf])
    row_upper = np.array([4.0, 12.0, 18.0, np.inf])

    # Variable bounds
    col_lower = np.array([0.0, 0.0])
    col_upper = np.array([np.inf, np.inf])

    # Objective coefficients
    c = np.array([3.0, 5.0])

    # Step 1: Create LP from arrays
    lp = ipmbridge.LinearProgram.from_arrays(
        A, row_lower, row_upper, col_lower, col_upper, c,
        sense=ipmbridge.ObjSense.MAXIMIZE,
    )
    print(f"LP: {lp.num_row} rows, {lp.num_col} columns")

    # Step 2: Inspect the standard form handed to the interior-point solver
    model = ipmbridge.build_standard_form(lp)
    print(f"Standard form: {model.num_row} rows, {model.num_col} columns "
          f"({model.num_slack} slack)")
    print(f"  rhs             = {model.rhs}")
    print(f"  constraint_type = {list(model.constraint_type)}")
    print()

    # Step 3: Set solver parameters
    param = ipmbridge.Parameters()
    param.time_limit = 60.0
    param.primal_feasibility_tolerance = 1e-8

    # Step 4: Solve
    solver = ipmbridge.IPMSolver(param=param)
    result = solver.solve(lp)

    # Step 5: Display results
    print()
    print(result)
    print()
    if result.is_optimal():
        print(f"  x1 = {result.col_value[0]:.6f}")
        print(f"  x2 = {result.col_value[1]:.6f}")
        print(f"  row duals = {result.row_dual}")
        print(f"  row basis = {[status.name for status in result.row_basis]}")


if __name__ == "__main__":
    main()
