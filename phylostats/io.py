from __future__ import print_function, division, absolute_import
import os
from io import StringIO
import pandas as pd
from Bio import Phylo
from . import MissingDataError

NEXUS_SUFFIXES = ['nex', 'nexus', 'tre', 'trees']
NAME_COLUMNS = ['name', 'strain', 'accession', 'species', 'taxon']
BRANCH_LENGTH_FORMAT = '%1.17g'


def read_tree(source, fmt=None):
    '''
    Read a tree from a file, a newick string or pass through a Bio.Phylo tree.

    Parameters
    ----------
    source : str, Bio.Phylo.BaseTree.Tree
        file name, newick string (ending with ';') or tree object
    fmt : str, optional
        'newick' or 'nexus'. If None, the format is guessed from the file suffix
        and newick is tried before nexus.

    Returns
    -------
    Bio.Phylo.BaseTree.Tree
        tree with all branch lengths set to floats
    '''
    if isinstance(source, Phylo.BaseTree.Tree):
        tree = source
    elif isinstance(source, str) and os.path.isfile(source):
        if fmt is None:
            suffix = source.split('.')[-1].lower()
            formats = ['nexus', 'newick'] if suffix in NEXUS_SUFFIXES else ['newick', 'nexus']
        else:
            formats = [fmt]
        tree = None
        for tmp_fmt in formats:
            try:
                tree = Phylo.read(source, tmp_fmt)
                break
            except Exception:
                continue
        if tree is None:
            raise ValueError('could not load tree, format needs to be nexus or newick! input was '+source)
    elif isinstance(source, str) and source.strip().endswith(';'):
        tree = Phylo.read(StringIO(source.strip()), fmt or 'newick')
    else:
        raise MissingDataError('could not load tree! input was '+str(source))

    if tree.count_terminals()<2:
        raise MissingDataError('tree has only %d tips. Please check your tree!'%tree.count_terminals())

    for node in tree.find_clades():
        node.branch_length = float(node.branch_length) if node.branch_length else 0.0
    return tree


def write_tree(tree, destination, fmt='newick'):
    """
    write tree to a file or file handle. Branch lengths are written with
    full float precision so that reading the file back reproduces the tree.
    """
    Phylo.write(tree, destination, fmt, format_branch_length=BRANCH_LENGTH_FORMAT)


def tree_to_newick(tree):
    """newick string of the tree with full precision branch lengths"""
    out = StringIO()
    Phylo.write(tree, out, 'newick', format_branch_length=BRANCH_LENGTH_FORMAT)
    return out.getvalue().strip()


def read_traits(fname, name_column=None, sep=None):
    """
    Read a table of traits into a data frame indexed by taxon name.

    Parameters
    ----------
    fname : str
        csv or tsv file
    name_column : str, optional
        column with the taxon names. If None, the first column
        called 'name', 'strain', 'accession', 'species' or 'taxon' is used,
        otherwise the first column.
    sep : str, optional
        column separator. Defaults to tab for .tsv files and comma otherwise.

    Returns
    -------
    pandas.DataFrame
        traits with taxon names as index
    """
    if not os.path.isfile(fname):
        raise MissingDataError("file with traits %s does not exist"%fname)
    if sep is None:
        sep = '\t' if fname.endswith('.tsv') else ','
    df = pd.read_csv(fname, sep=sep, skipinitialspace=True)

    if name_column:
        if name_column not in df.columns:
            raise MissingDataError("specified column '%s' for taxon name not found in trait file with columns: "%name_column
                                   + ", ".join(map(str, df.columns)))
        taxon_name = name_column
    else:
        candidates = [c for c in df.columns if str(c).lower() in NAME_COLUMNS]
        taxon_name = candidates[0] if len(candidates) else df.columns[0]

    df[taxon_name] = df[taxon_name].astype(str)
    return df.set_index(taxon_name)


def write_traits(df, fname):
    """write a trait table with its index as column 'name', tab separated for .tsv files"""
    df.to_csv(fname, sep='\t' if fname.endswith('.tsv') else ',', index_label='name')
