from __future__ import print_function
import pytest

tree_6 = "(((a:1,b:1):1,c:2):1,((d:0.5,e:0.5):1.5,f:2):1);"
states_6 = {'a':1, 'b':2, 'c':1, 'd':2, 'e':1, 'f':2}


def test_rate_matrix():
    import numpy as np
    from phylostats.discrete_models import rate_matrix, n_rate_parameters
    Q = rate_matrix('ER', [0.3], 3)
    assert np.allclose(Q.sum(axis=1), 0)
    assert np.allclose(Q[~np.eye(3, dtype=bool)], 0.3)
    Q = rate_matrix('SYM', [1.0, 2.0, 3.0], 3)
    assert np.allclose(Q, Q.T)
    assert Q[0, 2] == 2.0 and Q[1, 2] == 3.0
    Q = rate_matrix('ARD', [1, 2, 3, 4, 5, 6], 3)
    assert Q[0, 1] == 1 and Q[1, 0] == 3 and Q[2, 1] == 6
    assert [n_rate_parameters(m, 3) for m in ['ER', 'SYM', 'ARD']] == [1, 3, 6]


def test_two_tip_likelihood():
    import numpy as np
    from phylostats import DiscreteModelFit
    from phylostats.discrete_models import rate_matrix
    fitter = DiscreteModelFit("(a:1,b:1);", {'a':1, 'b':2}, verbose=0)
    q, t = 0.7, 1.0
    p_same = 0.5*(1+np.exp(-2*q*t))
    p_diff = 0.5*(1-np.exp(-2*q*t))
    assert fitter.log_likelihood(rate_matrix('ER', [q], 2)) == pytest.approx(np.log(p_same*p_diff))
    # best possible value is reached when the states are at equilibrium
    fit = fitter.fit('ER')
    assert fit.lnL == pytest.approx(np.log(0.25), abs=1e-6)


def test_fit_discrete():
    import numpy as np
    from phylostats import fit_discrete
    fit = fit_discrete(tree_6, states_6, model='ER')
    assert fit.states == [1, 2]
    assert fit.k == 1
    assert np.allclose(fit.Q.values.sum(axis=1), 0)
    assert np.isfinite(fit.lnL) and fit.lnL < 0
    anc = fit.marginal_ancestral
    assert anc.shape == (5, 2)
    assert np.allclose(anc.sum(axis=1), 1.0)
    assert anc.index[0] == 'n7'


def test_nested_mk_models():
    from phylostats import DiscreteModelFit, aic_weights
    fitter = DiscreteModelFit(tree_6, states_6, verbose=0)
    fits = fitter.fit_all()
    # with two states SYM and ER are the same model
    assert fits['SYM'].lnL == pytest.approx(fits['ER'].lnL, abs=1e-5)
    assert fits['ARD'].lnL >= fits['ER'].lnL - 1e-4
    assert fits['ARD'].k == 2
    assert aic_weights(fits, criterion='aic')['weight'].sum() == pytest.approx(1.0)


def test_marginal_states_follow_tips():
    from phylostats import fit_discrete
    clustered = {'a':1, 'b':1, 'c':1, 'd':2, 'e':2, 'f':2}
    anc = fit_discrete(tree_6, clustered, model='ER').marginal_ancestral
    # parent of a and b
    assert anc.loc['n9', 1] > 0.5
    # parent of d and e
    assert anc.loc['n11', 2] > 0.5


def test_missing_data():
    from phylostats import fit_discrete
    states = dict(states_6)
    states['c'] = '?'
    fit = fit_discrete(tree_6, states, model='ER')
    assert fit.n == 5
    assert fit.states == [1, 2]


def test_string_states():
    from phylostats import fit_discrete
    fit = fit_discrete("((a:1,b:1):1,(c:1,d:1):1);", {'a':'red', 'b':'blue', 'c':'red', 'd':'green'}, model='SYM')
    assert fit.states == ['blue', 'green', 'red']
    assert fit.k == 3


def test_reserved_code_rejected():
    import pandas as pd
    from phylostats import DiscreteModelFit, discretize, median_split
    raw = {'a':0.3, 'b':1.3, 'c':2.2, 'd':0.1, 'e':4.0, 'f':1.0}
    codes = median_split(pd.Series(raw))
    with pytest.raises(ValueError):
        DiscreteModelFit(tree_6, codes, verbose=0)
    # after remapping the codes are accepted
    fitter = DiscreteModelFit(tree_6, discretize(pd.Series(raw)), verbose=0)
    assert fitter.states == [1, 2]


def test_single_state():
    from phylostats import DiscreteModelFit, DegeneratePartitionError
    with pytest.raises(DegeneratePartitionError):
        DiscreteModelFit(tree_6, {k:1 for k in states_6}, verbose=0)


def test_get_fit():
    from phylostats import DiscreteModelFit, NotReadyError, UnknownMethodError
    fitter = DiscreteModelFit(tree_6, states_6, verbose=0)
    with pytest.raises(NotReadyError):
        fitter.get_fit('ER')
    with pytest.raises(UnknownMethodError):
        fitter.fit('GTR')
