from __future__ import print_function, division, absolute_import
import numpy as np
import pandas as pd
from scipy import linalg
from scipy.optimize import minimize_scalar
from . import config as psconf
from . import UnknownMethodError, MissingDataError, NotReadyError
from .treedata import reorder_to_tips
from .utils import tree_vcv, node_heights, tree_height
from .model_selection import aic, aicc
from .phylo_model import PhyloModel

MODELS = ['BM', 'OU', 'EB']
N_PARAMETERS = {'BM':2, 'OU':3, 'EB':3}


class ContinuousFit(object):
    """
    Small container for the result of a continuous trait model fit.
    """
    def __init__(self, model, lnL, params, n, converged=True):
        self.model = model
        self.lnL = lnL
        self.params = params
        self.n = n
        self.k = N_PARAMETERS[model]
        self.aic = aic(lnL, self.k)
        self.aicc = aicc(lnL, self.k, n)
        self.converged = converged

    def __str__(self):
        outstr = 'Model %s:\n --lnL:\t%1.3f\n --AIC:\t%1.3f\n --AICc:\t%1.3f\n'%(self.model, self.lnL, self.aic, self.aicc)
        for name, val in self.params.items():
            outstr += ' --%s:\t%1.4e\n'%(name, val)
        if not self.converged:
            outstr += ' (optimization did not converge)\n'
        return outstr


def _as_vector(tree, trait):
    """trait values as a float array positionally matched to the tips"""
    if isinstance(trait, pd.DataFrame):
        if trait.shape[1]!=1:
            raise MissingDataError("continuous models need a single trait, got columns: "+", ".join(map(str, trait.columns)))
        trait = trait.iloc[:,0]
    if isinstance(trait, (pd.Series, dict)):
        trait = reorder_to_tips(tree, trait)
    y = np.asarray(trait, dtype=float)
    if y.shape[0]!=tree.count_terminals():
        raise MissingDataError("trait vector has %d values, but the tree has %d tips"%(y.shape[0], tree.count_terminals()))
    if np.any(np.isnan(y)):
        raise MissingDataError("trait vector contains missing values, prune them from tree and data first")
    return y


class ContinuousModelFit(PhyloModel):
    """
    Maximum likelihood fits of Brownian motion (BM), Ornstein-Uhlenbeck (OU)
    and early burst (EB) models of continuous trait evolution. All models are
    multivariate normal on the tips with covariance sigma2*C, where C is
    derived from the shared path lengths of the tree. The root state z0 and
    sigma2 are profiled out analytically, the remaining parameter of OU and
    EB is optimized numerically.
    """

    def __init__(self, tree, trait, verbose=psconf.VERBOSE):
        """
        Parameters
        ----------
        tree : str, Bio.Phylo.BaseTree.Tree
            tree with branch lengths, or a file name or newick string
        trait : pandas.Series, dict, array-like
            trait values. Series and dicts are reordered to the tips of
            the tree, arrays are assumed to be in tip order already.
        verbose : int
            verbosity level as number from 0 (lowest) to 10 (highest).
        """
        super(ContinuousModelFit, self).__init__(tree=tree, verbose=verbose)
        self.y = _as_vector(self.tree, trait)
        self.n = self.y.shape[0]
        self.vcv = tree_vcv(self.tree)
        heights = node_heights(self.tree)
        self.tip_heights = np.array([heights[t] for t in self.tree.get_terminals()])
        self.height = tree_height(self.tree)
        self.fits = {}
        self.logger("ContinuousModelFit: set-up with %d tips"%self.n, 1)


    def correlation_matrix(self, model, par=None):
        """
        Covariance structure C of the tips for a given model up to the factor sigma2.

        Parameters
        ----------
        model : str
            'BM', 'OU' or 'EB'
        par : float
            selection strength alpha for OU, rate change a for EB
        """
        if model=='BM' or par is None:
            return self.vcv
        if model=='OU':
            # root fixed at the optimum
            d = self.tip_heights[:,None] + self.tip_heights[None,:] - 2*self.vcv
            return np.exp(-par*d)*(-np.expm1(-2*par*self.vcv))/(2*par)
        if model=='EB':
            return np.expm1(par*self.vcv)/par
        raise UnknownMethodError("ContinuousModelFit: unknown model '%s', choose one of "%model + ", ".join(MODELS))


    def profile_likelihood(self, C):
        """
        log-likelihood maximized over root state and sigma2 for a given C

        Returns
        -------
        tuple
            lnL, z0, sigma2
        """
        try:
            cho = linalg.cho_factor(C, lower=True)
        except linalg.LinAlgError:
            return -psconf.BIG_NUMBER, np.nan, np.nan
        ones = np.ones(self.n)
        Cinv_y = linalg.cho_solve(cho, self.y)
        Cinv_1 = linalg.cho_solve(cho, ones)
        z0 = ones.dot(Cinv_y)/ones.dot(Cinv_1)
        resid = self.y - z0
        sigma2 = resid.dot(linalg.cho_solve(cho, resid))/self.n
        if sigma2<=0:
            return -psconf.BIG_NUMBER, z0, sigma2
        logdet = 2*np.sum(np.log(np.diag(cho[0])))
        lnL = -0.5*(self.n*np.log(2*np.pi*sigma2) + logdet + self.n)
        return lnL, z0, sigma2


    def _parameter_bounds(self, model):
        if model=='OU':
            return psconf.OU_ALPHA_LOWER/self.height, psconf.OU_ALPHA_UPPER/self.height
        return psconf.EB_RATE_LOWER/self.height, psconf.EB_RATE_UPPER/self.height


    def fit(self, model='BM'):
        """
        fit a model by maximum likelihood

        Parameters
        ----------
        model : str
            'BM', 'OU' or 'EB'

        Returns
        -------
        ContinuousFit
            fitted model, also stored in self.fits
        """
        if model not in MODELS:
            raise UnknownMethodError("ContinuousModelFit: unknown model '%s', choose one of "%model + ", ".join(MODELS))
        self.logger("ContinuousModelFit.fit: fitting model %s"%model, 2)

        if model=='BM':
            lnL, z0, sigma2 = self.profile_likelihood(self.vcv)
            self.fits[model] = ContinuousFit(model, lnL, {'sigma2':sigma2, 'z0':z0}, self.n)
            return self.fits[model]

        lower, upper = self._parameter_bounds(model)
        if model=='OU':
            grid = np.exp(np.linspace(np.log(lower), np.log(upper), 4*psconf.N_RESTARTS))
        else:
            grid = np.linspace(lower, upper, 4*psconf.N_RESTARTS)

        neg_lnL = lambda x: -self.profile_likelihood(self.correlation_matrix(model, x))[0]
        grid_vals = np.array([neg_lnL(x) for x in grid])
        best = np.argmin(grid_vals)
        bracket = (grid[max(0, best-1)], grid[min(len(grid)-1, best+1)])
        sol = minimize_scalar(neg_lnL, bounds=bracket, method='bounded')

        converged = bool(sol.success)
        par = sol.x if (converged and sol.fun<=grid_vals[best]) else grid[best]
        if not converged:
            self.logger("ContinuousModelFit.fit: optimization of model %s did not converge: %s"%(model, sol.message), 1, warn=True)
        if np.isclose(par, lower) or np.isclose(par, upper):
            self.logger("ContinuousModelFit.fit: parameter of model %s is at the bound of the search interval"%model, 2, warn=True)

        lnL, z0, sigma2 = self.profile_likelihood(self.correlation_matrix(model, par))
        name = 'alpha' if model=='OU' else 'a'
        self.fits[model] = ContinuousFit(model, lnL, {name:par, 'sigma2':sigma2, 'z0':z0}, self.n, converged=converged)
        return self.fits[model]


    def fit_all(self, models=None):
        """fit several models, returns dict model name -> ContinuousFit"""
        models = MODELS if models is None else models
        return {m:self.fit(m) for m in models}


    def get_fit(self, model):
        if model not in self.fits:
            raise NotReadyError("ContinuousModelFit: model %s has not been fit yet"%model)
        return self.fits[model]


def fit_continuous(tree, trait, model='BM', verbose=0):
    """
    fit a model of continuous trait evolution to the trait values at the tips
    of the tree. Series and dicts are reordered to match the tips.

    Returns
    -------
    ContinuousFit
        fitted model with log-likelihood, AIC, AICc and parameter estimates
    """
    return ContinuousModelFit(tree, trait, verbose=verbose).fit(model)
