"""
Walk through the phylogenetics half of the workshop on simulated data:
simulate a tree and traits, put the trait table in tip order, fit models of
continuous and discrete trait evolution, compare them by AIC weights,
compute independent contrasts and draw stochastic character maps.
"""
from __future__ import print_function, division
import numpy as np
import matplotlib.pyplot as plt
from phylostats import reorder_to_tips, discretize, ContinuousModelFit, DiscreteModelFit, \
                       StochasticMapper, aic_weights, pic, contrast_regression
from phylostats.simulate import birth_death_tree, brownian_traits
from phylostats import plotting

if __name__=='__main__':
    plt.ion()
    rng = np.random.default_rng(2024)

    # a tree with 40 extant species and two correlated body size traits
    tree = birth_death_tree(40, birth_rate=1.0, death_rate=0.3, rng=rng)
    traits = brownian_traits(tree, n_traits=2, rng=rng, names=['mass', 'length'])
    traits['length'] = 0.8*traits['mass'] + 0.3*traits['length']

    # trait tables rarely come in the order of the tips: shuffle and reconcile
    shuffled = traits.sample(frac=1.0, random_state=1)
    traits = reorder_to_tips(tree, shuffled)
    print("first tips: ", ", ".join(traits.index[:5]))

    # continuous models
    cfit = ContinuousModelFit(tree, traits['mass'], verbose=2)
    fits = cfit.fit_all()
    for fit in fits.values():
        print(fit)
    print(aic_weights(fits).to_string(index=False))

    # independent contrasts and the regression through the origin
    reg = contrast_regression(tree, traits['mass'], traits['length'])
    print(reg.summary())
    plotting.plot_contrasts(pic(tree, traits['mass']), pic(tree, traits['length']), fit=reg)

    # split mass at the median and fit Mk models to the two size classes
    size_class = discretize(traits['mass'])
    print("size classes: ", size_class.value_counts().to_dict())
    dfit = DiscreteModelFit(tree, size_class, verbose=2)
    mk_fits = dfit.fit_all(['ER', 'ARD'])
    print(aic_weights(mk_fits).to_string(index=False))
    print(mk_fits['ER'].marginal_ancestral.head())

    # stochastic character maps under the ER model
    mapper = StochasticMapper(tree, size_class, model=mk_fits['ER'], verbose=2)
    histories = mapper.sample(nsim=100, rng=rng)
    summary = mapper.summarize(histories)
    print("mean number of changes: %1.2f"%summary['mean_changes'])
    print(summary['transitions'])

    fig, axs = plt.subplots(1, 2, figsize=(14, 8))
    plotting.plot_trait_on_tree(tree, traits['mass'], ax=axs[0])
    plotting.plot_simmap(tree, histories[0], ax=axs[1])
