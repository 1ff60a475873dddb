from __future__ import print_function, division, absolute_import
import numpy as np
import pandas as pd
from . import config as psconf
from . import DegeneratePartitionError


def median_split(values, high=psconf.HIGH_CODE, low=psconf.LOW_CODE):
    """
    Split a continuous trait at its sample median into two categories.
    Values greater or equal to the median are assigned `high`, values below
    the median `low`. Ties at the median therefore always end up in the
    high group and the two groups can differ in size.

    Parameters
    ----------
    values : array-like, pandas.Series
        continuous trait values
    high : int, optional
        code for values >= median
    low : int, optional
        code for values < median

    Returns
    -------
    numpy.array or pandas.Series
        integer codes, a Series keeps the index of the input

    Raises
    ------
    DegeneratePartitionError
        if the input is empty or the split results in a single category
    """
    if high==low:
        raise ValueError("median_split: high and low codes need to differ")
    x = np.asarray(values, dtype=float)
    if x.size==0:
        raise DegeneratePartitionError("median_split: cannot discretize an empty trait vector")
    if np.any(np.isnan(x)):
        raise ValueError("median_split: trait vector contains missing values")

    threshold = np.median(x)
    codes = np.where(x>=threshold, high, low)
    if len(np.unique(codes))<2:
        raise DegeneratePartitionError("median_split: all values are at or above the median %g, "
                                       "the split yields a single category"%threshold)

    if isinstance(values, pd.Series):
        return pd.Series(codes, index=values.index.copy(), name=values.name)
    return codes


def remap_code(codes, reserved=psconf.RESERVED_STATE_CODE, alternate=psconf.ALTERNATE_STATE_CODE):
    """
    replace every occurrence of the reserved code by the alternate code.
    All other codes are left as they are. The input is not modified.
    """
    if isinstance(codes, pd.Series):
        return codes.where(codes!=reserved, alternate)
    tmp = np.array(codes, copy=True)
    tmp[tmp==reserved] = alternate
    return tmp


def discretize(values, high=psconf.HIGH_CODE, low=psconf.LOW_CODE,
               reserved=psconf.RESERVED_STATE_CODE, alternate=psconf.ALTERNATE_STATE_CODE):
    """
    median split followed by removal of the reserved code, such that the
    result can be passed to :py:func:`phylostats.discrete_models.fit_discrete`

    Raises
    ------
    DegeneratePartitionError
        if the alternate code coincides with the code of the other group
        and the two groups would be merged
    """
    codes = remap_code(median_split(values, high=high, low=low),
                       reserved=reserved, alternate=alternate)
    if len(np.unique(np.asarray(codes)))<2:
        raise DegeneratePartitionError("discretize: replacing code %s by %s merges both groups into a single "
                                       "category"%(str(reserved), str(alternate)))
    return codes
