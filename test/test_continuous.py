from __future__ import print_function
import pytest

small_tree = "((a:1,b:1):1,c:2);"


def test_vcv():
    import numpy as np
    from phylostats.io import read_tree
    from phylostats.utils import tree_vcv
    C = tree_vcv(read_tree(small_tree))
    assert np.allclose(C, [[2, 1, 0], [1, 2, 0], [0, 0, 2]])


def test_bm_closed_form():
    import numpy as np
    from scipy.stats import multivariate_normal
    from phylostats import fit_continuous
    C = np.array([[2.0, 1, 0], [1, 2, 0], [0, 0, 2]])
    y = np.array([1.0, 3.0, 5.0])
    Cinv = np.linalg.inv(C)
    ones = np.ones(3)
    z0 = ones.dot(Cinv).dot(y)/ones.dot(Cinv).dot(ones)
    sigma2 = (y-z0).dot(Cinv).dot(y-z0)/3
    lnL = multivariate_normal.logpdf(y, mean=z0*ones, cov=sigma2*C)

    fit = fit_continuous(small_tree, {'c':5.0, 'a':1.0, 'b':3.0}, model='BM')
    assert fit.lnL == pytest.approx(lnL)
    assert fit.params['z0'] == pytest.approx(z0)
    assert fit.params['sigma2'] == pytest.approx(sigma2)
    assert fit.k == 2
    assert fit.aic == pytest.approx(-2*lnL + 4)


def test_trait_order_matters_only_for_arrays():
    import pandas as pd
    from phylostats import fit_continuous
    as_series = fit_continuous(small_tree, pd.Series({'c':5.0, 'b':3.0, 'a':1.0}))
    as_array = fit_continuous(small_tree, [1.0, 3.0, 5.0])
    assert as_series.lnL == pytest.approx(as_array.lnL)


def test_nested_models():
    from phylostats.simulate import pure_birth_tree, brownian_traits
    from phylostats import ContinuousModelFit
    tree = pure_birth_tree(30, rng=4)
    traits = brownian_traits(tree, sigma2=0.5, rng=4)
    fitter = ContinuousModelFit(tree, traits['trait1'], verbose=0)
    fits = fitter.fit_all()
    assert set(fits) == {'BM', 'OU', 'EB'}
    # OU and EB contain BM as a limiting case
    assert fits['OU'].lnL >= fits['BM'].lnL - 1e-6
    assert fits['EB'].lnL >= fits['BM'].lnL - 1e-6
    assert fits['OU'].params['alpha'] > 0
    assert fits['EB'].params['a'] < 0
    assert fitter.get_fit('BM') is fits['BM']


def test_not_ready_and_unknown_model():
    from phylostats import ContinuousModelFit, NotReadyError, UnknownMethodError
    fitter = ContinuousModelFit(small_tree, [1.0, 3.0, 5.0], verbose=0)
    with pytest.raises(NotReadyError):
        fitter.get_fit('OU')
    with pytest.raises(UnknownMethodError):
        fitter.fit('ACDC')


def test_missing_values():
    import numpy as np
    from phylostats import fit_continuous, MissingDataError
    with pytest.raises(MissingDataError):
        fit_continuous(small_tree, [1.0, np.nan, 5.0])
    with pytest.raises(MissingDataError):
        fit_continuous(small_tree, [1.0, 5.0])


def test_aic_weights():
    import numpy as np
    from phylostats import aic_weights, ContinuousModelFit
    from phylostats.simulate import pure_birth_tree, brownian_traits
    tree = pure_birth_tree(20, rng=8)
    trait = brownian_traits(tree, rng=8)['trait1']
    fits = ContinuousModelFit(tree, trait, verbose=0).fit_all()
    table = aic_weights(fits)
    assert table['weight'].sum() == pytest.approx(1.0)
    assert table['delta'].iloc[0] == 0
    assert np.all(np.diff(table['aicc'].values) >= 0)
    table_aic = aic_weights(list(fits.values()), criterion='aic')
    assert set(table_aic['model']) == {'BM', 'OU', 'EB'}


def test_aicc():
    import numpy as np
    from phylostats.model_selection import aic, aicc
    assert aic(-10.0, 2) == 24.0
    assert aicc(-10.0, 2, 10) == pytest.approx(24.0 + 12.0/7)
    assert np.isinf(aicc(-10.0, 3, 4))
