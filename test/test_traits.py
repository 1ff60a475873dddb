from __future__ import print_function
import pytest


def test_median_split_scenario():
    from phylostats import median_split, remap_code
    codes = median_split([1, 2, 3, 4, 5])
    assert list(codes) == [0, 0, 1, 1, 1]
    assert list(remap_code(codes)) == [2, 2, 1, 1, 1]


def test_discretize():
    from phylostats import discretize
    assert list(discretize([5.2, 0.1, 3.3, 8.0])) == [1, 2, 2, 1]
    assert list(discretize([1, 2, 3, 4, 5])) == [2, 2, 1, 1, 1]


def test_median_split_ties_go_high():
    from phylostats import median_split
    # median is 2, all values equal to it end up in the high group
    assert list(median_split([1, 2, 2, 2, 3])) == [0, 1, 1, 1, 1]
    # even number of values, median between the two middle values
    assert list(median_split([4, 1, 3, 2])) == [1, 0, 1, 0]


def test_median_split_custom_codes():
    from phylostats import median_split
    assert list(median_split([1, 2, 3], high=7, low=3)) == [3, 7, 7]
    with pytest.raises(ValueError):
        median_split([1, 2, 3], high=1, low=1)


def test_median_split_degenerate():
    from phylostats import median_split, DegeneratePartitionError
    with pytest.raises(DegeneratePartitionError):
        median_split([4.2, 4.2, 4.2])
    with pytest.raises(DegeneratePartitionError):
        median_split([])
    # single value is constant as well
    with pytest.raises(ValueError):
        median_split([1.0])


def test_median_split_nan():
    import numpy as np
    from phylostats import median_split
    with pytest.raises(ValueError):
        median_split([1.0, np.nan, 3.0])


def test_series_keeps_index():
    import pandas as pd
    from phylostats import discretize
    values = pd.Series([0.5, 3.0, 2.0], index=['b', 'a', 'c'], name='size')
    codes = discretize(values)
    assert list(codes.index) == ['b', 'a', 'c']
    assert codes.name == 'size'
    assert list(codes) == [2, 1, 1]


def test_remap_does_not_modify_input():
    import numpy as np
    import pandas as pd
    from phylostats import remap_code
    codes = np.array([0, 1, 0, 3])
    remapped = remap_code(codes)
    assert list(codes) == [0, 1, 0, 3]
    assert list(remapped) == [2, 1, 2, 3]

    series = pd.Series([0, 1, 1])
    assert list(remap_code(series, reserved=1, alternate=5)) == [0, 5, 5]
    assert list(series) == [0, 1, 1]


def test_reserved_code_never_in_output():
    import numpy as np
    from phylostats import discretize
    rng = np.random.default_rng(42)
    for trial in range(20):
        codes = discretize(rng.normal(size=15))
        assert 0 not in set(codes)
        assert set(codes) == {1, 2}


def test_ties_at_minimum_are_degenerate():
    from phylostats import median_split, DegeneratePartitionError
    # median is 1, every value is at or above it
    with pytest.raises(DegeneratePartitionError) as err:
        median_split([1, 1, 1, 2])
    assert "at or above the median" in str(err.value)


def test_alternate_code_must_not_merge_groups():
    import pandas as pd
    from phylostats import discretize, DegeneratePartitionError
    with pytest.raises(DegeneratePartitionError):
        discretize([1, 2, 3, 4, 5], alternate=1)
    with pytest.raises(DegeneratePartitionError):
        discretize(pd.Series([0.3, 2.0, 1.1]), high=5, alternate=5)
    assert list(discretize([1, 2, 3, 4, 5], alternate=7)) == [7, 7, 1, 1, 1]
