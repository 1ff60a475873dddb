from __future__ import print_function, division, absolute_import
from collections import namedtuple
import numpy as np
import pandas as pd
from . import config as psconf
from . import PhyloStatsUnknownError, MissingDataError
from .discrete_models import DiscreteModelFit, DiscreteFit
from .simulate import ctmc_path
from .utils import internal_node_names, make_rng

MappedHistory = namedtuple('MappedHistory', ['node_states', 'segments'])
MappedHistory.__doc__ = """
One stochastic character map.

node_states : dict
    node name -> state at the node
segments : dict
    node name -> list of (state, duration) along the branch leading to the node,
    starting at the parent
"""


class StochasticMapper(DiscreteModelFit):
    """
    Stochastic mapping of a discrete character on a tree (Nielsen 2002,
    Huelsenbeck et al 2003). Node states are sampled jointly given the
    tip states and the rate matrix, branch histories are sampled by
    rejection of unconditioned Markov chain paths that don't end in the
    sampled state of the child.
    """

    def __init__(self, tree, trait, model='ER', missing_data=psconf.MISSING_DATA,
                 verbose=psconf.VERBOSE):
        """
        Parameters
        ----------
        tree : str, Bio.Phylo.BaseTree.Tree
            tree with branch lengths
        trait : pandas.Series, dict, array-like
            tip states
        model : str, DiscreteFit
            name of the Mk model to fit ('ER', 'SYM', 'ARD') or a model
            that was fit to the same trait before
        """
        super(StochasticMapper, self).__init__(tree, trait, missing_data=missing_data, verbose=verbose)
        if isinstance(model, DiscreteFit):
            if list(model.states)!=list(self.states):
                raise MissingDataError("StochasticMapper: states of the model (%s) don't match the observed states (%s)"
                                       %(", ".join(map(str, model.states)), ", ".join(map(str, self.states))))
            self.model_fit = model
        else:
            self.model_fit = self.fit(model)
        self.Q = self.model_fit.Q.values
        self.node_names = internal_node_names(self.tree)
        for tip in self.tree.get_terminals():
            self.node_names[tip] = tip.name


    def sample_node_states(self, rng):
        """
        draw states of all nodes from their joint posterior distribution

        Returns
        -------
        dict
            clade -> state index
        """
        partials, P, log_scale = self.conditional_likelihoods(self.Q)
        node_state = {}
        p = self.root_prior*partials[self.tree.root]
        node_state[self.tree.root] = rng.choice(self.n_states, p=p/p.sum())
        for n in self.tree.get_nonterminals(order='preorder'):
            for c in n:
                p = P[c][node_state[n]]*partials[c]
                node_state[c] = rng.choice(self.n_states, p=p/p.sum())
        return node_state


    def sample_branch(self, start, end, length, rng):
        """
        draw a path of the Markov chain along a branch that starts in `start`
        and ends in `end` by rejection sampling
        """
        for trial in range(psconf.MAX_REJECTION_TRIALS):
            path = ctmc_path(self.Q, start, length, rng)
            if path[-1][0]==end:
                return path
        raise PhyloStatsUnknownError("StochasticMapper: could not sample a history of length %1.3e from state %s to %s"
                                     %(length, str(self.states[start]), str(self.states[end])))


    def sample(self, nsim=1, rng=None):
        """
        generate stochastic character maps

        Parameters
        ----------
        nsim : int
            number of maps
        rng : int, numpy.random.Generator, optional
            seed or random generator

        Returns
        -------
        list
            list of MappedHistory
        """
        rng = make_rng(rng)
        histories = []
        for si in range(nsim):
            node_state = self.sample_node_states(rng)
            segments = {}
            for n in self.tree.get_nonterminals(order='preorder'):
                for c in n:
                    path = self.sample_branch(node_state[n], node_state[c], c.branch_length, rng)
                    segments[self.node_names[c]] = [(self.states[s], dt) for s, dt in path]
            histories.append(MappedHistory({self.node_names[n]:self.states[s] for n, s in node_state.items()},
                                           segments))
        self.logger("StochasticMapper.sample: generated %d stochastic maps"%nsim, 2)
        return histories


    def summarize(self, histories):
        """
        average number of transitions and time spent in each state over
        a set of stochastic maps

        Returns
        -------
        dict
            'transitions': DataFrame with the mean number of changes from row to column state,
            'dwell_times': Series with the mean total branch length spent in each state,
            'mean_changes': mean total number of changes
        """
        if len(histories)==0:
            raise MissingDataError("StochasticMapper.summarize: no stochastic maps given")
        state_index = {s:si for si, s in enumerate(self.states)}
        transitions = np.zeros((self.n_states, self.n_states))
        dwell = np.zeros(self.n_states)
        for h in histories:
            for segs in h.segments.values():
                for (s1, dt), (s2, _) in zip(segs[:-1], segs[1:]):
                    transitions[state_index[s1], state_index[s2]] += 1
                for s, dt in segs:
                    dwell[state_index[s]] += dt

        nsim = len(histories)
        return {'transitions': pd.DataFrame(transitions/nsim, index=self.states, columns=self.states),
                'dwell_times': pd.Series(dwell/nsim, index=self.states),
                'mean_changes': transitions.sum()/nsim}
