from __future__ import division, print_function, absolute_import
import numpy as np
import pandas as pd
from . import UnknownMethodError, MissingDataError


def aic(lnL, k):
    return -2.0*lnL + 2.0*k


def aicc(lnL, k, n):
    """
    small sample corrected AIC. Returns inf if there are not more
    observations than parameters + 1.
    """
    if n-k-1<=0:
        return np.inf
    return aic(lnL, k) + 2.0*k*(k+1)/(n-k-1)


def aic_weights(fits, criterion='aicc'):
    """
    Rank competing model fits by an information criterion.

    Parameters
    ----------
    fits : list, dict
        fitted models with attributes `model`, `lnL`, `k`, `aic` and `aicc`,
        e.g. results of fit_continuous or fit_discrete. If a dict is passed,
        its keys are used as model names.
    criterion : str
        'aic' or 'aicc'

    Returns
    -------
    pandas.DataFrame
        one row per model sorted by the criterion, with the difference
        to the best model ('delta') and the Akaike weight ('weight')
    """
    if criterion not in ['aic', 'aicc']:
        raise UnknownMethodError("aic_weights: unknown criterion '%s', use 'aic' or 'aicc'"%criterion)
    if isinstance(fits, dict):
        items = list(fits.items())
    else:
        items = [(f.model, f) for f in fits]
    if len(items)==0:
        raise MissingDataError("aic_weights: no model fits given")

    df = pd.DataFrame([{'model':name, 'lnL':f.lnL, 'k':f.k, 'aic':f.aic, 'aicc':f.aicc}
                       for name, f in items])
    scores = df[criterion].values
    if not np.any(np.isfinite(scores)):
        raise MissingDataError("aic_weights: criterion %s is not finite for any model"%criterion)
    df['delta'] = scores - np.min(scores[np.isfinite(scores)])
    rel_lh = np.exp(-0.5*df['delta'].values)
    df['weight'] = rel_lh/rel_lh.sum()
    return df.sort_values(criterion).reset_index(drop=True)
