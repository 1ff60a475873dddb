from __future__ import print_function, division, absolute_import
import time, sys
from textwrap import fill
from . import config as psconf
from . import MissingDataError
from .io import read_tree


class PhyloModel(object):
    """
    Base class of the models that are fit on a single tree. Takes care of
    loading the tree and of logging.
    """

    def __init__(self, tree=None, verbose=psconf.VERBOSE, **kwargs):
        """
        Parameters
        ----------
        tree : str, Bio.Phylo.BaseTree.Tree
           Phylogenetic tree. A string is interpreted as a file name or a
           newick string.

        verbose : int
           Verbosity level as number from 0 (lowest) to 10 (highest).
        """
        if tree is None:
            raise MissingDataError("%s requires a tree!"%type(self).__name__)
        self.t_start = time.time()
        self.verbose = verbose
        self.log_messages = set()
        self.tree = read_tree(tree)


    def logger(self, msg, level, warn=False, only_once=False):
        """
        Print log message *msg* to stdout.

        Parameters
        -----------

         msg : str
            String to print on the screen

         level : int
            Log-level. Only the messages with a level higher than the
            current verbose level will be shown.

         warn : bool
            Warning flag. If True, the message will be displayed
            regardless of its log-level.

         only_once : bool
            Don't repeat a message that was printed before.

        """
        if only_once and msg in self.log_messages:
            return

        self.log_messages.add(msg)

        lw=80
        if level<self.verbose or (warn and level<=self.verbose):
            dt = time.time() - self.t_start
            outstr = '\n' if level<2 else ''
            initial_indent = format(dt, '4.2f')+'\t' + level*'-'
            subsequent_indent = " "*len(format(dt, '4.2f')) + "\t" + " "*level
            outstr += fill(msg, width=lw, initial_indent=initial_indent, subsequent_indent=subsequent_indent)
            print(outstr, file=sys.stdout)
