from __future__ import division, print_function, absolute_import
import numpy as np
import pandas as pd
from Bio.Phylo.BaseTree import Tree, Clade
from . import MissingDataError
from .utils import make_rng, prune_tips


def _new_lineage():
    return Clade(branch_length=0.0)


def pure_birth_tree(n_tips, birth_rate=1.0, rng=None):
    """
    Simulate an ultrametric tree under a pure birth (Yule) process that is
    stopped once `n_tips` lineages exist. All lineages are extended by the
    waiting time to the next (unrealized) speciation event.

    Parameters
    ----------
    n_tips : int
        number of tips, at least 2
    birth_rate : float
        speciation rate per lineage
    rng : int, numpy.random.Generator, optional
        seed or random generator

    Returns
    -------
    Bio.Phylo.BaseTree.Tree
        tree with tips named t1, t2, ...
    """
    if n_tips<2:
        raise MissingDataError("pure_birth_tree: need at least 2 tips, got %d"%n_tips)
    rng = make_rng(rng)
    root = Clade(branch_length=0.0)
    active = [_new_lineage(), _new_lineage()]
    root.clades = list(active)
    while True:
        k = len(active)
        dt = rng.exponential(1.0/(k*birth_rate))
        for c in active:
            c.branch_length += dt
        if k>=n_tips:
            break
        parent = active.pop(rng.integers(k))
        parent.clades = [_new_lineage(), _new_lineage()]
        active.extend(parent.clades)

    tree = Tree(root=root, rooted=True)
    for ti, tip in enumerate(tree.get_terminals()):
        tip.name = 't%d'%(ti+1)
    return tree


def birth_death_tree(n_tips, birth_rate=1.0, death_rate=0.5, rng=None, max_attempts=1000):
    """
    Simulate a birth-death tree conditioned on `n_tips` extant lineages.
    Extinct lineages are pruned from the tree that is returned, hence the
    tree is ultrametric.
    """
    if death_rate>=birth_rate:
        raise ValueError("birth_death_tree: death rate needs to be smaller than the birth rate")
    if n_tips<2:
        raise MissingDataError("birth_death_tree: need at least 2 tips, got %d"%n_tips)
    rng = make_rng(rng)
    total_rate = birth_rate + death_rate
    for attempt in range(max_attempts):
        root = Clade(branch_length=0.0)
        active = [_new_lineage(), _new_lineage()]
        root.clades = list(active)
        extinct = []
        while 0<len(active)<n_tips:
            k = len(active)
            dt = rng.exponential(1.0/(k*total_rate))
            for c in active:
                c.branch_length += dt
            lineage = active.pop(rng.integers(k))
            if rng.random()<birth_rate/total_rate:
                lineage.clades = [_new_lineage(), _new_lineage()]
                active.extend(lineage.clades)
            else:
                extinct.append(lineage)

        if len(active)<n_tips:
            continue
        # waiting time to the next event that doesn't happen
        dt = rng.exponential(1.0/(len(active)*total_rate))
        for c in active:
            c.branch_length += dt
        for ci, c in enumerate(extinct):
            c.name = 'extinct%d'%ci
        for ci, c in enumerate(active):
            c.name = 'extant%d'%ci

        tree = prune_tips(Tree(root=root, rooted=True), [c.name for c in extinct])
        for ti, tip in enumerate(tree.get_terminals()):
            tip.name = 't%d'%(ti+1)
        return tree

    raise MissingDataError("birth_death_tree: all %d simulations went extinct"%max_attempts)


def brownian_traits(tree, sigma2=1.0, root_value=0.0, n_traits=1, rng=None, names=None):
    """
    Evolve continuous traits along the tree under Brownian motion.

    Parameters
    ----------
    tree : Bio.Phylo.BaseTree.Tree
        tree along which the traits evolve
    sigma2 : float, array-like
        rate of Brownian motion, one value per trait or a shared value
    root_value : float, array-like
        trait value at the root
    n_traits : int
        number of independent traits
    names : list, optional
        column names, default trait1, trait2, ...

    Returns
    -------
    pandas.DataFrame
        tip values, rows in the order of tree.get_terminals()
    """
    rng = make_rng(rng)
    sigma = np.sqrt(np.ones(n_traits)*sigma2)
    values = {tree.root: np.ones(n_traits)*root_value}
    # generate values in preorder
    for n in tree.get_nonterminals(order='preorder'):
        for c in n:
            values[c] = values[n] + sigma*np.sqrt(c.branch_length)*rng.standard_normal(n_traits)

    if names is None:
        names = ['trait%d'%(i+1) for i in range(n_traits)]
    tips = tree.get_terminals()
    return pd.DataFrame(np.array([values[t] for t in tips]),
                        index=pd.Index([t.name for t in tips], name='name'), columns=names)


def ctmc_path(Q, start, length, rng):
    """
    Simulate the history of a continuous time Markov chain along a branch.

    Parameters
    ----------
    Q : numpy.array
        rate matrix with rows summing to zero, Q[i,j] rate from i to j
    start : int
        index of the state at the beginning of the branch
    length : float
        branch length

    Returns
    -------
    list
        (state index, duration) segments in the order they occur
    """
    segments = []
    state, t = start, 0.0
    while True:
        exit_rate = -Q[state, state]
        dt = rng.exponential(1.0/exit_rate) if exit_rate>0 else np.inf
        if t+dt>=length:
            segments.append((state, length-t))
            return segments
        segments.append((state, dt))
        t += dt
        jump = Q[state].copy()
        jump[state] = 0
        state = rng.choice(len(jump), p=jump/jump.sum())


def discrete_trait(tree, Q, root_state=None, states=None, rng=None):
    """
    Simulate a discrete character along the tree.

    Parameters
    ----------
    Q : numpy.array, pandas.DataFrame
        rate matrix. If a DataFrame is passed, its index provides the state labels.
    root_state : optional
        state at the root, drawn uniformly if None
    states : list, optional
        state labels, default 1..k

    Returns
    -------
    pandas.Series
        tip states in the order of tree.get_terminals()
    """
    rng = make_rng(rng)
    if isinstance(Q, pd.DataFrame):
        states = list(Q.index) if states is None else states
        Q = Q.values
    Q = np.array(Q, dtype=float)
    if states is None:
        states = list(range(1, Q.shape[0]+1))
    if root_state is None:
        root_index = rng.integers(len(states))
    else:
        root_index = states.index(root_state)

    node_state = {tree.root: root_index}
    for n in tree.get_nonterminals(order='preorder'):
        for c in n:
            node_state[c] = ctmc_path(Q, node_state[n], c.branch_length, rng)[-1][0]

    tips = tree.get_terminals()
    return pd.Series([states[node_state[t]] for t in tips],
                     index=pd.Index([t.name for t in tips], name='name'), name='state')
