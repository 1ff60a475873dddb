from __future__ import print_function, division, absolute_import
import numpy as np
import pandas as pd
import statsmodels.api as sm
from . import config as psconf
from . import PhyloStatsError, MissingDataError
from .treedata import reorder_to_tips
from .utils import internal_node_names, is_bifurcating
from .io import read_tree


def pic(tree, trait, var_contrasts=False):
    """
    Phylogenetically independent contrasts (Felsenstein 1985).

    For every internal node with children i and j, the contrast
    (x_i - x_j)/sqrt(v_i + v_j) is computed, where x are the trait values of
    the children (estimated for internal children) and v the branch lengths
    extended by the uncertainty of the estimates of internal children.

    Parameters
    ----------
    tree : str, Bio.Phylo.BaseTree.Tree
        fully bifurcating tree
    trait : pandas.Series, dict, array-like
        trait values, reordered to the tips if a Series or dict is passed
    var_contrasts : bool
        also return the expected variance of each contrast

    Returns
    -------
    pandas.Series or pandas.DataFrame
        contrasts indexed by node name in preorder, with an additional
        column 'variance' if var_contrasts is True
    """
    tree = read_tree(tree)
    if not is_bifurcating(tree):
        raise PhyloStatsError("pic: the tree needs to be fully bifurcating, resolve polytomies first")
    if isinstance(trait, (pd.Series, dict)):
        trait = reorder_to_tips(tree, trait)
    x = np.asarray(trait, dtype=float)
    if x.shape[0]!=tree.count_terminals():
        raise MissingDataError("trait vector has %d values, but the tree has %d tips"%(x.shape[0], tree.count_terminals()))

    value = {}
    length = {}
    for tip, val in zip(tree.get_terminals(), x):
        value[tip] = val
        length[tip] = tip.branch_length

    contrast, variance = {}, {}
    for n in tree.get_nonterminals(order='postorder'):
        ci, cj = n.clades
        vi, vj = length[ci], length[cj]
        if vi+vj<psconf.MIN_BRANCH_LENGTH:
            raise PhyloStatsError("pic: both branches below node %s have zero length"%str(n.name))
        contrast[n] = (value[ci]-value[cj])/np.sqrt(vi+vj)
        variance[n] = vi+vj
        value[n] = (value[ci]*vj + value[cj]*vi)/(vi+vj)
        length[n] = (n.branch_length or 0.0) + vi*vj/(vi+vj)

    names = internal_node_names(tree)
    nodes = tree.get_nonterminals(order='preorder')
    index = pd.Index([names[n] for n in nodes], name='node')
    res = pd.Series([contrast[n] for n in nodes], index=index,
                    name=getattr(trait, 'name', None) or 'contrast')
    if var_contrasts:
        return pd.DataFrame({'contrast':res.values, 'variance':[variance[n] for n in nodes]}, index=index)
    return res


def contrast_regression(tree, x, y):
    """
    regress the contrasts of y on the contrasts of x through the origin

    Returns
    -------
    statsmodels.regression.linear_model.RegressionResultsWrapper
        ordinary least squares fit without intercept
    """
    cx = pic(tree, x)
    cy = pic(tree, y)
    return sm.OLS(cy.values, cx.values.reshape(-1, 1)).fit()
