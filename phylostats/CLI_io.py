import os, sys
from . import MissingDataError
from .io import read_tree, read_traits
from .treedata import intersect_tree_data


def get_outdir(params, suffix='_phylostats'):
    """
    output directory of a subcommand: --outdir if given (created when
    missing), otherwise a new directory named after today's date and the
    subcommand, e.g. 2024-05-01_fitcontinuous/

    Returns
    -------
    str
        directory name ending with '/'
    """
    if params.outdir:
        outdir = params.outdir.rstrip('/')
        if not os.path.exists(outdir):
            os.makedirs(outdir)
            return outdir + '/'
        if os.path.isdir(outdir):
            return outdir + '/'
        print("designated output location %s is not a directory, "
              "writing to a dated directory instead"%params.outdir, file=sys.stderr)

    from datetime import date
    stem = date.today().isoformat()
    outdir = stem + suffix.rstrip('/') + '/'
    count = 1
    while os.path.exists(outdir):
        outdir = stem + '-%04d'%count + suffix.rstrip('/') + '/'
        count += 1
    os.makedirs(outdir)
    return outdir


def get_basename(params, outdir):
    """output directory followed by the --prefix of the file names, if any"""
    if getattr(params, 'prefix', None):
        return outdir + params.prefix.rstrip('_') + '_'
    return outdir


def select_attribute(params, traits):
    """
    pick the column to analyze: the one given by --attribute or the
    first column of the trait table
    """
    if params.attribute:
        if params.attribute in traits.columns:
            return params.attribute
        raise MissingDataError("The specified attribute '%s' was not found in the trait file %s. "%(params.attribute, params.traits)
                               + "Available columns are: "+", ".join(map(str, traits.columns)))
    attr = traits.columns[0]
    print("Attribute for the analysis was not specified. Using "+str(attr), file=sys.stderr)
    return attr


def load_tree_data(params):
    """
    read tree and trait table, drop unmatched tips and rows and put the
    rows of the table in the order of the tips
    """
    tree = read_tree(params.tree)
    traits = read_traits(params.traits, name_column=params.name_column)
    print("Using column '%s' as taxon name. This needs to match the taxa in the tree!"%traits.index.name)
    td = intersect_tree_data(tree, traits)
    print("read tree from file %s with %d leaves, %d of which have trait data"
          %(params.tree, tree.count_terminals(), td.tree.count_terminals()))
    return td
