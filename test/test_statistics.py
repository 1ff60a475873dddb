from __future__ import print_function
import pytest


def test_shapiro_wilk():
    import numpy as np
    from phylostats import statistics, MissingDataError
    rng = np.random.default_rng(1)
    res = statistics.shapiro_wilk(rng.normal(size=50))
    assert 0 <= res['p_value'] <= 1
    assert res['n_samples'] == 50
    skewed = statistics.shapiro_wilk(rng.exponential(size=200)**3)
    assert not skewed['is_normal']
    with pytest.raises(MissingDataError):
        statistics.shapiro_wilk([1.0, 2.0])


def test_t_tests():
    import numpy as np
    from phylostats import statistics
    rng = np.random.default_rng(2)
    x = rng.normal(0, 1, size=40)
    y = rng.normal(3, 1, size=40)
    res = statistics.t_test(x, y)
    assert res['test'] == 'Welch t-test'
    assert res['is_significant']
    assert res['cohens_d'] < 0
    assert statistics.t_test(x, y, equal_var=True)['test'] == 'Student t-test'
    paired = statistics.t_test(x+1.0+rng.normal(0, 0.1, size=40), x, paired=True)
    assert paired['mean_difference'] == pytest.approx(1.0, abs=0.1)
    assert paired['is_significant']
    one = statistics.t_test(y, mu=3.0)
    assert one['df'] == 39


def test_wilcoxon():
    import numpy as np
    from phylostats import statistics
    rng = np.random.default_rng(3)
    x = rng.normal(0, 1, size=30)
    y = rng.normal(2, 1, size=30)
    assert statistics.wilcoxon_test(x, y)['test'] == 'Mann-Whitney U test'
    assert statistics.wilcoxon_test(x, y)['is_significant']
    assert statistics.wilcoxon_test(x, x+2+rng.normal(0, 0.1, size=30), paired=True)['is_significant']
    assert statistics.wilcoxon_test(x)['test'] == 'Wilcoxon signed-rank test'


def test_anova_and_tukey():
    from phylostats import statistics
    data = statistics.simulate_groups([0.0, 0.2, 4.0], n=15, rng=4)
    res = statistics.one_way_anova(data, 'value', 'group')
    assert res['is_significant']
    assert 0 < res['eta_squared'] < 1
    assert res['n_groups'] == 3
    tukey = statistics.tukey_hsd(data, 'value', 'group')
    assert len(tukey) == 3
    assert {'group1', 'group2', 'reject'} <= set(tukey.columns)
    kw = statistics.kruskal_wallis(data, 'value', 'group')
    assert kw['is_significant']


def test_anova_column_names():
    from phylostats import statistics, MissingDataError
    data = statistics.simulate_groups({'x':0.0, 'y':1.0}, n=10, rng=5)
    data = data.rename(columns={'value':'body mass'})
    res = statistics.one_way_anova(data, 'body mass', 'group')
    assert 0 <= res['p_value'] <= 1
    with pytest.raises(MissingDataError):
        statistics.one_way_anova(data, 'mass', 'group')


def test_manova():
    from phylostats import statistics
    data = statistics.simulate_groups([[0, 0], [2, 0], [0, 2]], n=20, n_responses=2, rng=6)
    res = statistics.manova(data, ['y1', 'y2'], 'group')
    assert res['is_significant']
    assert 0 < res['wilks_lambda'] < 1
    assert res['pillai'] > 0


def test_linear_model():
    from phylostats import statistics
    data = statistics.simulate_regression(n=100, slope=2.0, intercept=1.0, sd=0.1, rng=7)
    fit = statistics.linear_model(data, 'y ~ x')
    assert fit.params['x'] == pytest.approx(2.0, abs=0.05)
    assert fit.params['Intercept'] == pytest.approx(1.0, abs=0.1)


def test_chi_square():
    from phylostats import statistics, MissingDataError
    res = statistics.chi_square([10, 10, 10])
    assert res['statistic'] == pytest.approx(0.0)
    assert not res['is_significant']
    res = statistics.chi_square([30, 10], expected=[0.5, 0.5])
    assert res['statistic'] == pytest.approx(10.0)
    res = statistics.chi_square([[30, 5], [5, 30]])
    assert res['is_significant']
    assert 0 < res['cramers_v'] <= 1
    with pytest.raises(MissingDataError):
        statistics.chi_square([10, 10], expected=[1, 1, 1])
