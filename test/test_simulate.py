from __future__ import print_function
import pytest


def test_pure_birth_tree():
    from phylostats.simulate import pure_birth_tree
    from phylostats.utils import is_ultrametric, is_bifurcating
    tree = pure_birth_tree(25, birth_rate=2.0, rng=1)
    assert tree.count_terminals() == 25
    assert [t.name for t in tree.get_terminals()] == ['t%d'%i for i in range(1, 26)]
    assert is_ultrametric(tree)
    assert is_bifurcating(tree)
    assert all(n.branch_length >= 0 for n in tree.find_clades())


def test_pure_birth_reproducible():
    from phylostats.simulate import pure_birth_tree
    from phylostats.io import tree_to_newick
    assert tree_to_newick(pure_birth_tree(10, rng=5)) == tree_to_newick(pure_birth_tree(10, rng=5))


def test_birth_death_tree():
    from phylostats.simulate import birth_death_tree
    from phylostats.utils import is_ultrametric
    tree = birth_death_tree(15, birth_rate=1.0, death_rate=0.4, rng=7)
    assert tree.count_terminals() == 15
    assert is_ultrametric(tree)
    with pytest.raises(ValueError):
        birth_death_tree(10, birth_rate=1.0, death_rate=1.0)


def test_brownian_traits():
    import numpy as np
    from phylostats.simulate import pure_birth_tree, brownian_traits
    tree = pure_birth_tree(12, rng=2)
    traits = brownian_traits(tree, sigma2=1.0, n_traits=3, rng=2)
    assert traits.shape == (12, 3)
    assert list(traits.columns) == ['trait1', 'trait2', 'trait3']
    assert list(traits.index) == [t.name for t in tree.get_terminals()]

    flat = brownian_traits(tree, sigma2=0.0, root_value=4.5, rng=2)
    assert np.allclose(flat['trait1'].values, 4.5)


def test_ctmc_path():
    import numpy as np
    from phylostats.simulate import ctmc_path
    Q = np.array([[-1.0, 1.0], [2.0, -2.0]])
    rng = np.random.default_rng(11)
    for trial in range(50):
        path = ctmc_path(Q, 0, 1.7, rng)
        assert path[0][0] == 0
        assert np.isclose(sum(dt for s, dt in path), 1.7)
        # consecutive segments are in different states
        assert all(s1 != s2 for (s1, _), (s2, _) in zip(path[:-1], path[1:]))


def test_discrete_trait():
    import numpy as np
    from phylostats.simulate import pure_birth_tree, discrete_trait
    tree = pure_birth_tree(10, rng=3)
    frozen = discrete_trait(tree, np.zeros((3, 3)), root_state=2, rng=3)
    assert list(frozen.values) == [2]*10

    Q = np.array([[-1.0, 1.0], [1.0, -1.0]])
    states = discrete_trait(tree, Q, rng=3)
    assert set(states.values) <= {1, 2}
    assert list(states.index) == [t.name for t in tree.get_terminals()]
