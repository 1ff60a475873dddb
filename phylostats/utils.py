from __future__ import division, print_function, absolute_import
import copy
import numpy as np
from . import config as psconf
from . import MissingDataError


def tip_labels(tree):
    """ordered list of tip names as returned by tree.get_terminals()"""
    return [n.name for n in tree.get_terminals()]


def node_heights(tree):
    """
    distance of each clade from the root. The branch length of the
    root itself is ignored.

    Returns
    -------
    dict
        clade -> distance from root
    """
    heights = {}
    for n in tree.find_clades(order='preorder'):
        if n == tree.root:
            heights[n] = 0.0
        for c in n:
            heights[c] = heights[n] + (c.branch_length or 0.0)
    return heights


def tree_height(tree):
    """largest distance from the root to a tip"""
    heights = node_heights(tree)
    return max(heights[n] for n in tree.get_terminals())


def is_ultrametric(tree, tol=psconf.ULTRAMETRIC_TOL):
    """
    check whether all tips are at the same distance from the root, up to
    a tolerance relative to the tree height
    """
    heights = node_heights(tree)
    tip_heights = np.array([heights[n] for n in tree.get_terminals()])
    return (tip_heights.max()-tip_heights.min()) <= tol*max(tip_heights.max(), psconf.TINY_NUMBER)


def is_bifurcating(tree):
    """true if every internal node has exactly two children"""
    return all(len(n.clades)==2 for n in tree.get_nonterminals())


def internal_node_names(tree):
    """
    names for internal nodes in preorder. Unnamed nodes are numbered
    after the tips, i.e. the root of a tree with N tips is 'n<N+1>'.

    Returns
    -------
    dict
        clade -> name
    """
    n_tips = tree.count_terminals()
    names = {}
    for ni, n in enumerate(tree.get_nonterminals(order='preorder')):
        names[n] = n.name if n.name else 'n%d'%(n_tips+ni+1)
    return names


def tree_layout(tree):
    """
    assign vertical positions for drawing: tip i of tree.get_terminals()
    is placed at y=i+1, internal nodes halfway between their outermost
    children. The positions are stored as attribute `ypos` of each clade.
    """
    tip_count = 0
    for node in tree.find_clades(order="postorder"):
        if node.is_terminal():
            tip_count += 1
            node.ypos = tip_count
        else:
            child_pos = [c.ypos for c in node]
            node.ypos = 0.5*(min(child_pos) + max(child_pos))


def prune_tips(tree, labels):
    """
    return a copy of the tree with the tips in `labels` removed. Nodes
    left with a single child are collapsed and their branch length is
    added to the child.

    Parameters
    ----------
    tree : Bio.Phylo.BaseTree.Tree
        input tree, not modified
    labels : iterable
        names of the tips to remove
    """
    labels = set(labels)
    pruned = copy.deepcopy(tree)
    if len(labels)==0:
        return pruned

    remaining = [n for n in pruned.get_terminals() if n.name not in labels]
    if len(remaining)<2:
        raise MissingDataError("pruning would leave %d tips on the tree"%len(remaining))

    for leaf in [n for n in pruned.get_terminals() if n.name in labels]:
        pruned.prune(leaf)

    for node in pruned.find_clades():
        node.branch_length = node.branch_length if node.branch_length else 0.0
    return pruned


def tip_indices(tree):
    """
    map each clade to the (sorted) indices of the tips it subtends,
    in the order of tree.get_terminals()
    """
    ii = {}
    for li, l in enumerate(tree.get_terminals()):
        ii[l] = np.array([li])
    for n in tree.get_nonterminals(order='postorder'):
        ii[n] = np.sort(np.concatenate([ii[c] for c in n]))
    return ii


def tree_vcv(tree):
    """
    calculate the phylogenetic variance-covariance matrix of the tips:
    entry (i,j) is the length of the path from the root shared by tips i and j.

    Returns
    -------

     M : (np.array)
        covariance matrix with tips arranged in the order of tree.get_terminals()
    """
    ii = tip_indices(tree)
    N = tree.count_terminals()
    # accumulate the covariance matrix by adding 'squares'
    M = np.zeros((N, N))
    for n in tree.find_clades():
        if n == tree.root:
            continue
        M[np.ix_(ii[n], ii[n])] += n.branch_length or 0.0
    return M


def make_rng(rng=None):
    """turn a seed, a Generator or None into a numpy Generator"""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)
