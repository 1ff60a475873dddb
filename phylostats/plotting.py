from __future__ import print_function, division, absolute_import
import numpy as np
from Bio import Phylo
from . import utils
from .treedata import reorder_to_tips


def _get_axes(ax):
    import matplotlib.pyplot as plt
    if ax is None:
        fig = plt.figure()
        ax = plt.subplot(111)
    return ax


def plot_tree(tree, ax=None, tip_colors=None, **kwargs):
    '''
    draw a tree with Bio.Phylo.draw on a matplotlib axis
    Args:
        tree:   Bio.Phylo tree
        ax:     axis object. will create new axis of none specified
        tip_colors:     dictionary mapping tip names to colors
        **kwargs:   arbitrary key word arguments that are passed down to Phylo.draw
    '''
    ax = _get_axes(ax)
    if "label_func" not in kwargs:
        nleafs = tree.count_terminals()
        kwargs["label_func"] = lambda x:x.name if (x.is_terminal() and nleafs<30) else ""
    if tip_colors is not None:
        kwargs["label_colors"] = tip_colors
    Phylo.draw(tree, axes=ax, do_show=False, **kwargs)
    ax.set_ylabel('')
    return ax


def plot_trait_on_tree(tree, trait, ax=None, cmap='viridis', markersize=40, **kwargs):
    '''
    draw a tree and mark the tips with the trait values on a color scale
    Args:
        tree:   Bio.Phylo tree
        trait:  pandas.Series or dict with the trait values of the tips
        cmap:   name of the matplotlib colormap
    '''
    import matplotlib.pyplot as plt
    values = reorder_to_tips(tree, trait).values.astype(float)
    ax = plot_tree(tree, ax=ax, **kwargs)
    depths = tree.depths()
    if not max(depths.values()):
        depths = tree.depths(unit_branch_lengths=True)
    tips = tree.get_terminals()
    sc = ax.scatter([depths[t] for t in tips], np.arange(1, len(tips)+1), c=values,
                    cmap=cmap, s=markersize, zorder=3)
    plt.colorbar(sc, ax=ax, label=getattr(trait, 'name', None) or 'trait')
    return ax


def plot_simmap(tree, history, colors=None, ax=None, lw=3):
    '''
    draw one stochastic character map, branches colored by the mapped states
    Args:
        tree:   Bio.Phylo tree the map was generated on
        history:    MappedHistory as returned by StochasticMapper.sample
        colors: dictionary mapping states to colors
    '''
    import matplotlib.pyplot as plt
    ax = _get_axes(ax)
    if colors is None:
        states = sorted(set(s for segs in history.segments.values() for s, dt in segs))
        cycle = plt.rcParams['axes.prop_cycle'].by_key()['color']
        colors = {s:cycle[si%len(cycle)] for si, s in enumerate(states)}

    utils.tree_layout(tree)
    names = utils.internal_node_names(tree)
    for tip in tree.get_terminals():
        names[tip] = tip.name
    x_pos = {tree.root: 0.0}
    for n in tree.get_nonterminals(order='preorder'):
        ax.plot([x_pos[n], x_pos[n]], [min(c.ypos for c in n), max(c.ypos for c in n)], c='k', lw=1)
        for c in n:
            x = x_pos[n]
            for state, dt in history.segments[names[c]]:
                ax.plot([x, x+dt], [c.ypos, c.ypos], c=colors[state], lw=lw, solid_capstyle='butt')
                x += dt
            x_pos[c] = x

    for tip in tree.get_terminals():
        ax.text(x_pos[tip], tip.ypos, ' '+tip.name, va='center')
    from matplotlib.lines import Line2D
    ax.legend([Line2D([0], [0], c=colors[s], lw=lw) for s in colors], [str(s) for s in colors])
    ax.invert_yaxis()
    ax.set_yticks([])
    ax.set_xlabel('branch length')
    return ax


def plot_contrasts(x_contrasts, y_contrasts, fit=None, ax=None):
    '''
    scatter plot of two sets of independent contrasts with the regression
    line through the origin
    Args:
        fit:    result of phylostats.contrasts.contrast_regression
    '''
    ax = _get_axes(ax)
    cx = np.asarray(x_contrasts, dtype=float)
    cy = np.asarray(y_contrasts, dtype=float)
    ax.scatter(cx, cy)
    if fit is not None:
        xlim = np.array([min(0, cx.min()), max(0, cx.max())])
        ax.plot(xlim, fit.params[0]*xlim, c='k', ls='--')
    ax.axhline(0, c='0.7', lw=0.5)
    ax.axvline(0, c='0.7', lw=0.5)
    ax.set_xlabel(getattr(x_contrasts, 'name', None) or 'contrasts x')
    ax.set_ylabel(getattr(y_contrasts, 'name', None) or 'contrasts y')
    return ax


def plot_groups(data, response, group, ax=None):
    '''box plot of a response for each level of a grouping column'''
    ax = _get_axes(ax)
    levels = sorted(data[group].dropna().unique())
    ax.boxplot([data.loc[data[group]==g, response].dropna().values for g in levels])
    ax.set_xticks(np.arange(1, len(levels)+1))
    ax.set_xticklabels([str(g) for g in levels])
    ax.set_xlabel(group)
    ax.set_ylabel(response)
    return ax


def plot_qq(x, ax=None):
    '''normal quantile-quantile plot to check normality by eye'''
    from scipy import stats
    ax = _get_axes(ax)
    stats.probplot(np.asarray(x, dtype=float), dist='norm', plot=ax)
    return ax
