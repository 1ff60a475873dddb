"""
Matching of trait tables to trees.

Comparative methods consume trait vectors positionally: value i belongs
to tip i of tree.get_terminals(). The functions here make sure the rows of a
trait table line up with the tips of a tree before any model is fit.
"""
from __future__ import print_function, division, absolute_import
import sys
from collections import namedtuple
import numpy as np
import pandas as pd
from . import TipCorrespondenceError, MissingDataError
from .utils import tip_labels, prune_tips


def reorder_to_tips(tip_order, table):
    """
    Reorder the rows of a trait table to match the tip order of a tree.

    Parameters
    ----------
    tip_order : list, Bio.Phylo.BaseTree.Tree
        ordered tip labels, or a tree whose terminals define the order
    table : pandas.DataFrame, pandas.Series, dict
        traits indexed by tip label. Rows may be in any order and the table
        may contain rows that are not tips of the tree.

    Returns
    -------
    pandas.DataFrame or pandas.Series
        new table with exactly one row per tip, row i belonging to tip i

    Raises
    ------
    TipCorrespondenceError
        if a tip label matches no row or more than one row of the table
    """
    if hasattr(tip_order, 'get_terminals'):
        tip_order = tip_labels(tip_order)
    tip_order = list(tip_order)
    if isinstance(table, dict):
        table = pd.Series(table)

    keys = [str(k) for k in table.index]
    row_position = {}
    duplicated = set()
    for pos, key in enumerate(keys):
        if key in row_position:
            duplicated.add(key)
        row_position[key] = pos

    positions = np.zeros(len(tip_order), dtype=int)
    for ti, tip in enumerate(tip_order):
        if tip in duplicated:
            raise TipCorrespondenceError("tip '%s' matches more than one row of the trait table"%tip)
        if tip not in row_position:
            raise TipCorrespondenceError("tip '%s' has no row in the trait table"%tip)
        positions[ti] = row_position[tip]

    reordered = table.iloc[positions].copy()
    reordered.index = pd.Index(tip_order, name=table.index.name)
    return reordered


def name_check(tree, table):
    """
    compare tip labels and table rows

    Returns
    -------
    dict
        'tree_not_data': tips without a row in the table,
        'data_not_tree': rows that don't correspond to a tip
    """
    tips = tip_labels(tree)
    rows = [str(k) for k in table.index]
    row_set, tip_set = set(rows), set(tips)
    return {'tree_not_data': [t for t in tips if t not in row_set],
            'data_not_tree': [r for r in rows if r not in tip_set]}


class TreeData(namedtuple('TreeData', ['tree', 'data'])):
    """
    A tree together with a trait table whose rows are in tip order.
    Produced by :py:func:`intersect_tree_data`.
    """
    __slots__ = ()

    @property
    def tips(self):
        return tip_labels(self.tree)

    def trait(self, column):
        """trait values of one column as a Series in tip order"""
        if isinstance(self.data, pd.Series):
            return self.data
        if column not in self.data.columns:
            raise MissingDataError("column '%s' not found. Available columns are: "%column
                                   + ", ".join(map(str, self.data.columns)))
        return self.data[column]


def intersect_tree_data(tree, table, warn=True):
    """
    Drop tips without data and rows without a tip, then reorder the
    table to match the tips of the pruned tree.

    Parameters
    ----------
    tree : Bio.Phylo.BaseTree.Tree
        tree, not modified
    table : pandas.DataFrame, pandas.Series
        traits indexed by tip label
    warn : bool
        print the dropped names to stderr

    Returns
    -------
    TreeData
        pruned tree and reconciled table
    """
    if isinstance(table, dict):
        table = pd.Series(table)
    table = table.copy()
    table.index = pd.Index([str(k) for k in table.index], name=table.index.name)
    dropped = name_check(tree, table)

    if warn and len(dropped['tree_not_data']):
        print("Dropped tips without data: "+", ".join(dropped['tree_not_data']), file=sys.stderr)
    if warn and len(dropped['data_not_tree']):
        print("Dropped data rows not in tree: "+", ".join(dropped['data_not_tree']), file=sys.stderr)

    pruned = prune_tips(tree, dropped['tree_not_data'])
    matched = table.loc[~table.index.isin(dropped['data_not_tree'])]
    return TreeData(pruned, reorder_to_tips(pruned, matched))
