from __future__ import print_function, division, absolute_import
import numbers
import numpy as np
import pandas as pd
from scipy.linalg import expm
from scipy.optimize import minimize
from . import config as psconf
from . import UnknownMethodError, MissingDataError, NotReadyError, DegeneratePartitionError
from .treedata import reorder_to_tips
from .utils import internal_node_names, tree_height
from .model_selection import aic, aicc
from .phylo_model import PhyloModel

MODELS = ['ER', 'SYM', 'ARD']


def is_missing(value, missing_data=psconf.MISSING_DATA):
    if value is None or (isinstance(value, str) and value==missing_data):
        return True
    return isinstance(value, numbers.Number) and np.isnan(value)


def n_rate_parameters(model, n_states):
    if model=='ER':
        return 1
    elif model=='SYM':
        return n_states*(n_states-1)//2
    elif model=='ARD':
        return n_states*(n_states-1)
    raise UnknownMethodError("unknown discrete model '%s', choose one of "%model + ", ".join(MODELS))


def rate_matrix(model, rates, n_states):
    """
    Assemble the rate matrix from a vector of free rates.

    Parameters
    ----------
    model : str
        'ER' (one shared rate), 'SYM' (symmetric rates, filled row by row
        above the diagonal) or 'ARD' (all off-diagonal rates, filled row by row)
    rates : numpy.array
        free rates, length as given by n_rate_parameters

    Returns
    -------
    numpy.array
        rate matrix with rows summing to zero
    """
    Q = np.zeros((n_states, n_states), dtype=float)
    if model=='ER':
        Q[:,:] = rates[0]
    elif model=='SYM':
        iu = np.triu_indices(n_states, k=1)
        Q[iu] = rates
        Q = Q + Q.T
    elif model=='ARD':
        off_diag = ~np.eye(n_states, dtype=bool)
        Q[off_diag] = rates
    else:
        raise UnknownMethodError("unknown discrete model '%s', choose one of "%model + ", ".join(MODELS))
    np.fill_diagonal(Q, 0)
    np.fill_diagonal(Q, -Q.sum(axis=1))
    return Q


class DiscreteFit(object):
    """
    Small container for the result of a discrete trait model fit.
    """
    def __init__(self, model, states, Q, lnL, n, converged=True, marginal_ancestral=None):
        self.model = model
        self.states = list(states)
        self.Q = pd.DataFrame(Q, index=self.states, columns=self.states)
        self.lnL = lnL
        self.n = n
        self.k = n_rate_parameters(model, len(self.states))
        self.aic = aic(lnL, self.k)
        self.aicc = aicc(lnL, self.k, n)
        self.converged = converged
        self.marginal_ancestral = marginal_ancestral

    def __str__(self):
        outstr = 'Model %s:\n --lnL:\t%1.3f\n --AIC:\t%1.3f\n --AICc:\t%1.3f\n'%(self.model, self.lnL, self.aic, self.aicc)
        outstr += ' --Q:\n' + self.Q.to_string(float_format=lambda x:'%1.4e'%x) + '\n'
        if not self.converged:
            outstr += ' (optimization did not converge)\n'
        return outstr


class DiscreteModelFit(PhyloModel):
    """
    Maximum likelihood fits of Mk models of discrete character evolution
    with equal rates (ER), symmetric rates (SYM) or all rates different
    (ARD). The likelihood is computed by pruning over the tree with a flat
    prior on the root state.
    """

    def __init__(self, tree, trait, missing_data=psconf.MISSING_DATA,
                 reserved=psconf.RESERVED_STATE_CODE, verbose=psconf.VERBOSE):
        """
        Parameters
        ----------
        tree : str, Bio.Phylo.BaseTree.Tree
            tree with branch lengths
        trait : pandas.Series, dict, array-like
            observed states of the tips. Series and dicts are reordered to the
            tips of the tree, arrays are assumed to be in tip order already.
        missing_data : str
            marker for tips with unknown state, NaN and None are treated as missing as well
        reserved : int
            numeric state code that is not accepted
        verbose : int
            verbosity level as number from 0 (lowest) to 10 (highest).

        Raises
        ------
        ValueError
            if the trait contains the reserved code
        DegeneratePartitionError
            if less than two states are observed
        """
        super(DiscreteModelFit, self).__init__(tree=tree, verbose=verbose)
        if isinstance(trait, pd.DataFrame):
            if trait.shape[1]!=1:
                raise MissingDataError("discrete models need a single trait, got columns: "+", ".join(map(str, trait.columns)))
            trait = trait.iloc[:,0]
        if isinstance(trait, (pd.Series, dict)):
            trait = reorder_to_tips(self.tree, trait)
        values = list(trait)
        if len(values)!=self.tree.count_terminals():
            raise MissingDataError("trait vector has %d values, but the tree has %d tips"%(len(values), self.tree.count_terminals()))

        observed = [v for v in values if not is_missing(v, missing_data)]
        if any(isinstance(v, numbers.Number) and not isinstance(v, bool) and v==reserved for v in observed):
            raise ValueError("state code %s is reserved, recode the trait (e.g. with phylostats.traits.remap_code)"%str(reserved))
        self.states = sorted(set(observed))
        if len(self.states)<2:
            raise DegeneratePartitionError("DiscreteModelFit: only %d state(s) observed, need at least two"%len(self.states))

        self.n_states = len(self.states)
        self.n = len(observed)
        state_index = {s:si for si, s in enumerate(self.states)}
        self.tip_partials = {}
        for tip, v in zip(self.tree.get_terminals(), values):
            if is_missing(v, missing_data):
                self.tip_partials[tip] = np.ones(self.n_states)
            else:
                self.tip_partials[tip] = np.eye(self.n_states)[state_index[v]]
        self.root_prior = np.ones(self.n_states)/self.n_states
        self.fits = {}
        self.logger("DiscreteModelFit: set-up with %d tips and states "%len(values)
                    + ", ".join(map(str, self.states)), 1)


    def transition_matrices(self, Q):
        """matrix exponential exp(Q t) for every branch"""
        return {n:expm(Q*n.branch_length) for n in self.tree.find_clades() if n!=self.tree.root}


    def conditional_likelihoods(self, Q):
        """
        postorder pass computing the likelihood of the data below each node
        conditional on its state. Partials are normalized at each node and the
        log scale factors accumulated.

        Returns
        -------
        tuple
            dict of normalized partials, dict of transition matrices, total log scale
        """
        P = self.transition_matrices(Q)
        partials = {}
        log_scale = 0.0
        for n in self.tree.find_clades(order='postorder'):
            if n.is_terminal():
                partials[n] = self.tip_partials[n]
                continue
            tmp = np.ones(self.n_states)
            for c in n:
                tmp *= P[c].dot(partials[c])
            norm = tmp.max()
            if norm<=0:
                return partials, P, -np.inf
            partials[n] = tmp/norm
            log_scale += np.log(norm)
        return partials, P, log_scale


    def log_likelihood(self, Q):
        partials, P, log_scale = self.conditional_likelihoods(Q)
        if not np.isfinite(log_scale):
            return psconf.MIN_LOG
        return log_scale + np.log(self.root_prior.dot(partials[self.tree.root]))


    def marginal_ancestral_states(self, Q):
        """
        marginal probabilities of the states of internal nodes

        Returns
        -------
        pandas.DataFrame
            one row per internal node (preorder), one column per state
        """
        partials, P, log_scale = self.conditional_likelihoods(Q)
        outside = {self.tree.root: self.root_prior}
        marginals = {}
        for n in self.tree.get_nonterminals(order='preorder'):
            tmp = outside[n]*partials[n]
            marginals[n] = tmp/tmp.sum()
            for c in n:
                # everything except the subtree of c, conditional on the state of n
                excl = outside[n].copy()
                for sib in n:
                    if sib is not c:
                        excl *= P[sib].dot(partials[sib])
                msg = excl.dot(P[c])
                outside[c] = msg/msg.sum()

        names = internal_node_names(self.tree)
        nodes = self.tree.get_nonterminals(order='preorder')
        return pd.DataFrame(np.array([marginals[n] for n in nodes]),
                            index=pd.Index([names[n] for n in nodes], name='node'), columns=self.states)


    def fit(self, model='ER'):
        """
        fit an Mk model by maximum likelihood. Rates are optimized on a log scale
        from several starting points.

        Returns
        -------
        DiscreteFit
            fitted model, also stored in self.fits
        """
        if model not in MODELS:
            raise UnknownMethodError("DiscreteModelFit: unknown model '%s', choose one of "%model + ", ".join(MODELS))
        self.logger("DiscreteModelFit.fit: fitting model %s"%model, 2)
        n_par = n_rate_parameters(model, self.n_states)
        height = tree_height(self.tree)
        bounds = [(np.log(psconf.MK_RATE_LOWER/height), np.log(psconf.MK_RATE_UPPER/height))]*n_par

        def neg_lnL(log_rates):
            return -self.log_likelihood(rate_matrix(model, np.exp(log_rates), self.n_states))

        best = None
        # starting rates of the order of one change per tree height
        for factor in np.logspace(-2, 2, psconf.N_RESTARTS):
            x0 = np.ones(n_par)*np.log(factor/height)
            sol = minimize(neg_lnL, x0, method='L-BFGS-B', bounds=bounds)
            if best is None or sol.fun<best.fun:
                best = sol

        if not best.success:
            self.logger("DiscreteModelFit.fit: optimization of model %s did not converge: %s"%(model, best.message), 1, warn=True)
        Q = rate_matrix(model, np.exp(best.x), self.n_states)
        self.fits[model] = DiscreteFit(model, self.states, Q, -best.fun, self.n,
                                       converged=bool(best.success),
                                       marginal_ancestral=self.marginal_ancestral_states(Q))
        return self.fits[model]


    def fit_all(self, models=None):
        """fit several models, returns dict model name -> DiscreteFit"""
        models = MODELS if models is None else models
        return {m:self.fit(m) for m in models}


    def get_fit(self, model):
        if model not in self.fits:
            raise NotReadyError("DiscreteModelFit: model %s has not been fit yet"%model)
        return self.fits[model]


def fit_discrete(tree, trait, model='ER', missing_data=psconf.MISSING_DATA, verbose=0):
    """
    fit an Mk model of discrete trait evolution to the states at the tips
    of the tree. Series and dicts are reordered to match the tips.

    Returns
    -------
    DiscreteFit
        fitted model with log-likelihood, AIC, AICc, rate matrix and
        marginal ancestral state probabilities
    """
    return DiscreteModelFit(tree, trait, missing_data=missing_data, verbose=verbose).fit(model)
