import numpy as np
import pytest
from scipy import sparse

from ipmbridge import LinearProgram, ObjSense, RowTag, build_standard_form, tag_rows

from conftest import make_mixed_lp


def test_tag_rows_covers_every_bound_combination():
    lower = np.array([5.0, 2.0, -np.inf, -np.inf, 3.0])
    upper = np.array([5.0, 10.0, 7.0, np.inf, np.inf])

    tags = tag_rows(lower, upper)

    assert list(tags) == [RowTag.EQUALITY, RowTag.BOXED, RowTag.UPPER, RowTag.FREE, RowTag.LOWER]


def test_single_bound_rows_keep_dimensions(inequality_lp):
    model = build_standard_form(inequality_lp)

    assert model.num_col == inequality_lp.num_col
    assert model.num_row == inequality_lp.num_row
    assert list(model.constraint_type) == ['>', '<', '=']
    np.testing.assert_array_equal(model.rhs, [1.0, 8.0, 4.0])
    np.testing.assert_array_equal(model.to_csc().toarray(), inequality_lp.to_csc().toarray())


def test_mixed_rows_dimensions(mixed_lp):
    model = build_standard_form(mixed_lp)

    # one boxed row adds a column, one free row is dropped
    assert model.num_col == mixed_lp.num_col + 1
    assert model.num_row == mixed_lp.num_row - 1
    assert model.num_slack == 1
    assert len(model.a_start) == model.num_col + 1


def test_mixed_rows_rhs_and_type(mixed_lp):
    model = build_standard_form(mixed_lp)

    assert list(model.constraint_type) == ['=', '=', '<', '>']
    np.testing.assert_array_equal(model.rhs, [5.0, 0.0, 7.0, 3.0])


def test_slack_column_for_boxed_row(mixed_lp):
    model = build_standard_form(mixed_lp)
    slack = mixed_lp.num_col

    assert model.col_lb[slack] == 2.0
    assert model.col_ub[slack] == 10.0
    assert model.a_start[slack + 1] - model.a_start[slack] == 1
    entry = model.a_start[slack]
    assert model.a_index[entry] == model.reduced_row[1]
    assert model.a_value[entry] == -1.0


def test_free_row_contributes_no_entries(mixed_lp):
    model = build_standard_form(mixed_lp)

    expected = np.array([
        [1.0, 2.0, 0.0],
        [3.0, 4.0, -1.0],
        [5.0, 6.0, 0.0],
        [9.0, 10.0, 0.0],
    ])
    np.testing.assert_array_equal(model.to_csc().toarray(), expected)
    assert model.num_nz == mixed_lp.num_nz - 2 + 1


def test_row_compaction_preserves_order(mixed_lp):
    model = build_standard_form(mixed_lp)

    assert list(model.reduced_row) == [0, 1, 2, -1, 3]
    kept = model.reduced_row[model.reduced_row >= 0]
    assert np.all(np.diff(kept) > 0)


def test_slack_entry_uses_reduced_row_index():
    # The free row comes first, so the boxed row moves from index 1 to 0
    lp = LinearProgram.from_arrays(
        np.array([[1.0], [2.0]]),
        row_lower=np.array([-np.inf, 1.0]),
        row_upper=np.array([np.inf, 3.0]),
        col_lower=np.array([0.0]),
        col_upper=np.array([np.inf]),
        cost=np.array([1.0]),
    )

    model = build_standard_form(lp)

    assert model.num_row == 1
    np.testing.assert_array_equal(model.a_index, [0, 0])
    np.testing.assert_array_equal(model.a_value, [2.0, -1.0])
    assert list(model.slack_rows) == [1]
    assert list(model.slack_of_row) == [-1, 0]


def test_objective_scaled_by_sense_and_zero_extended():
    model = build_standard_form(make_mixed_lp(sense=ObjSense.MAXIMIZE))

    np.testing.assert_array_equal(model.obj, [-1.0, 2.0, 0.0])


def test_column_bounds_extended_with_row_bounds(mixed_lp):
    model = build_standard_form(mixed_lp)

    np.testing.assert_array_equal(model.col_lb, [0.0, -1.0, 2.0])
    np.testing.assert_array_equal(model.col_ub, [np.inf, 4.0, 10.0])


def test_transform_leaves_lp_untouched(mixed_lp):
    before = {name: getattr(mixed_lp, name).copy()
              for name in ('col_cost', 'row_lower', 'row_upper', 'a_start', 'a_index', 'a_value')}

    build_standard_form(mixed_lp)

    for name, value in before.items():
        np.testing.assert_array_equal(getattr(mixed_lp, name), value)


def test_all_rows_free():
    lp = LinearProgram.from_arrays(
        sparse.csc_matrix(np.array([[1.0, 1.0]])),
        row_lower=np.array([-np.inf]),
        row_upper=np.array([np.inf]),
        col_lower=np.zeros(2),
        col_upper=np.ones(2),
        cost=np.ones(2),
    )

    model = build_standard_form(lp)

    assert model.num_row == 0
    assert model.num_col == 2
    assert model.num_nz == 0
    np.testing.assert_array_equal(model.a_start, [0, 0, 0])


def test_several_boxed_and_free_rows():
    # rows: boxed, free, equality, boxed, free, upper, boxed
    lp = LinearProgram.from_arrays(
        np.arange(1.0, 15.0).reshape(7, 2),
        row_lower=np.array([1.0, -np.inf, 3.0, -1.0, -np.inf, -np.inf, 0.0]),
        row_upper=np.array([2.0, np.inf, 3.0, 4.0, np.inf, 6.0, 5.0]),
        col_lower=np.zeros(2),
        col_upper=np.full(2, np.inf),
        cost=np.ones(2),
    )

    model = build_standard_form(lp)

    assert model.num_col == lp.num_col + 3
    assert model.num_row == lp.num_row - 2
    assert list(model.reduced_row) == [0, -1, 1, 2, -1, 3, 4]
    assert list(model.slack_rows) == [0, 3, 6]
    assert list(model.slack_of_row) == [0, -1, -1, 1, -1, -1, 2]
    assert list(model.constraint_type) == ['=', '=', '=', '<', '=']
    np.testing.assert_array_equal(model.rhs, [0.0, 3.0, 0.0, 6.0, 0.0])

    # one -1 entry per slack column, on the reduced index of its row
    slack_start = model.a_start[lp.num_col:]
    np.testing.assert_array_equal(np.diff(slack_start), [1, 1, 1])
    np.testing.assert_array_equal(model.a_index[slack_start[0]:], [0, 2, 4])
    np.testing.assert_array_equal(model.a_value[slack_start[0]:], [-1.0, -1.0, -1.0])
    np.testing.assert_array_equal(model.col_lb[lp.num_col:], [1.0, -1.0, 0.0])
    np.testing.assert_array_equal(model.col_ub[lp.num_col:], [2.0, 4.0, 5.0])
    assert model.num_nz == 2 * 5 + 3


def test_from_arrays_rejects_bad_lengths():
    with pytest.raises(ValueError):
        LinearProgram.from_arrays(
            np.eye(2),
            row_lower=np.zeros(3),
            row_upper=np.ones(3),
            col_lower=np.zeros(2),
            col_upper=np.ones(2),
            cost=np.ones(2),
        )


def test_from_arrays_rejects_unknown_matrix_type():
    with pytest.raises(TypeError):
        LinearProgram.from_arrays(
            [[1.0]],
            row_lower=np.zeros(1),
            row_upper=np.ones(1),
            col_lower=np.zeros(1),
            col_upper=np.ones(1),
            cost=np.ones(1),
        )


def test_constructor_rejects_row_index_out_of_range():
    with pytest.raises(ValueError):
        LinearProgram(
            num_col=1, num_row=1,
            col_cost=[1.0], col_lower=[0.0], col_upper=[1.0],
            row_lower=[0.0], row_upper=[1.0],
            a_start=[0, 1], a_index=[3], a_value=[1.0],
        )
