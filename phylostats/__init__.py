version="0.3.0"
## Here we define an error class for phylostats errors. MissingData, UnknownMethod and NotReady errors
## are all due to incorrect calling of phylostats functions or input data that does not fit our base assumptions.
## TipCorrespondence and DegeneratePartition errors guard the inputs of the comparative analyses:
## a trait table that does not line up with the tree tips, or a discretized trait with a single state.
class PhyloStatsError(Exception):
    """
    PhyloStatsError class
    Parent class for more specific errors
    Raised when phylostats is used incorrectly in contrast with `PhyloStatsUnknownError`
    `PhyloStatsUnknownError` is raised when the reason of the error is unknown, could indicate bug
    """
    pass

class MissingDataError(PhyloStatsError):
    """MissingDataError class raised when tree, trait table or a column are missing"""
    pass

class UnknownMethodError(PhyloStatsError):
    """UnknownMethodError class raised when an unknown model or test is requested"""
    pass

class NotReadyError(PhyloStatsError):
    """NotReadyError class raised when results are requested before a model is fit"""
    pass

class TipCorrespondenceError(PhyloStatsError, LookupError):
    """TipCorrespondenceError class raised when a tree tip does not match exactly one trait table row"""
    pass

class DegeneratePartitionError(PhyloStatsError, ValueError):
    """DegeneratePartitionError class raised when a discretized trait does not have two distinct states"""
    pass

class PhyloStatsUnknownError(Exception):
    """PhyloStatsUnknownError class raised when model fitting fails for an unknown reason. This might be due to data not fulfilling base assumptions or due to bugs in phylostats."""
    pass

import os, sys
recursion_limit = os.environ.get("PHYLOSTATS_RECURSION_LIMIT")
if recursion_limit:
    sys.setrecursionlimit(int(recursion_limit))
else:
    sys.setrecursionlimit(max(sys.getrecursionlimit(), 10000))

from .io import read_tree, write_tree, read_traits
from .treedata import TreeData, reorder_to_tips, name_check, intersect_tree_data
from .traits import median_split, remap_code, discretize
from .continuous_models import ContinuousModelFit, fit_continuous
from .discrete_models import DiscreteModelFit, fit_discrete
from .model_selection import aic_weights
from .contrasts import pic, contrast_regression
from .simmap import StochasticMapper
from .argument_parser import make_parser
