import sys
import numpy as np
import pandas as pd
from . import PhyloStatsError
from . import simulate as sim
from .io import read_tree, read_traits, write_tree, write_traits
from .treedata import reorder_to_tips
from .traits import discretize as median_discretize
from .continuous_models import ContinuousModelFit
from .discrete_models import DiscreteModelFit
from .model_selection import aic_weights
from .contrasts import pic, contrast_regression
from .CLI_io import get_outdir, get_basename, select_attribute, load_tree_data


def simulate_data(params):
    """
    implementing phylostats simulate
    """
    outdir = get_outdir(params, '_simulation')
    basename = get_basename(params, outdir)
    rng = np.random.default_rng(params.rng_seed)
    try:
        if params.death_rate>0:
            tree = sim.birth_death_tree(params.ntips, birth_rate=params.birth_rate,
                                        death_rate=params.death_rate, rng=rng)
        else:
            tree = sim.pure_birth_tree(params.ntips, birth_rate=params.birth_rate, rng=rng)
        traits = sim.brownian_traits(tree, sigma2=params.sigma2, n_traits=params.ntraits, rng=rng)
    except (ValueError, PhyloStatsError) as e:
        print(e, file=sys.stderr)
        print("Simulation failed.", file=sys.stderr)
        return 1

    tree_name = basename + 'tree.nwk'
    write_tree(tree, tree_name)
    print("--- simulated tree with %d tips saved as \n\t %s\n"%(tree.count_terminals(), tree_name))
    traits_name = basename + 'traits.csv'
    write_traits(traits, traits_name)
    print("--- simulated %d Brownian motion trait(s) saved as \n\t %s\n"%(params.ntraits, traits_name))
    return 0


def reorder_traits(params):
    """
    implementing phylostats reorder
    """
    try:
        if params.intersect:
            td = load_tree_data(params)
            reordered = td.data
        else:
            tree = read_tree(params.tree)
            reordered = reorder_to_tips(tree, read_traits(params.traits, name_column=params.name_column))
    except (LookupError, ValueError, PhyloStatsError) as e:
        print(e, file=sys.stderr)
        if isinstance(e, LookupError):
            print("Trait table could not be matched to the tree. Use --intersect to drop unmatched tips and rows.", file=sys.stderr)
        return 1

    outdir = get_outdir(params, '_reorder')
    fname = get_basename(params, outdir) + 'reordered_traits.csv'
    write_traits(reordered, fname)
    print("--- trait table in tip order saved as \n\t %s\n"%fname)
    return 0


def discretize_trait(params):
    """
    implementing phylostats discretize
    """
    try:
        traits = read_traits(params.traits, name_column=params.name_column)
        attr = select_attribute(params, traits)
        codes = median_discretize(traits[attr], reserved=params.reserved, alternate=params.alternate)
    except (ValueError, PhyloStatsError) as e:
        print(e, file=sys.stderr)
        return 1

    print("Median of '%s': %1.4g"%(attr, np.median(traits[attr].values)))
    for code, count in codes.value_counts().sort_index().items():
        print("\tstate %s: %d taxa"%(code, count))
    traits[attr+'_discrete'] = codes
    outdir = get_outdir(params, '_discretize')
    fname = get_basename(params, outdir) + 'discretized_traits.csv'
    write_traits(traits, fname)
    print("--- trait table with discretized column saved as \n\t %s\n"%fname)
    return 0


def fit_continuous_models(params):
    """
    implementing phylostats fitcontinuous
    """
    try:
        td = load_tree_data(params)
        attr = select_attribute(params, td.data)
        fitter = ContinuousModelFit(td.tree, td.trait(attr), verbose=params.verbose)
        fits = fitter.fit_all(params.models)
    except (ValueError, PhyloStatsError) as e:
        print(e, file=sys.stderr)
        print("Model fitting failed, check error messages above and your input data.", file=sys.stderr)
        return 1

    print("\nFits of continuous trait models to '%s':\n"%attr)
    for fit in fits.values():
        print(fit)
    table = aic_weights(fits, criterion=params.criterion)
    print(table.to_string(index=False))

    outdir = get_outdir(params, '_fitcontinuous')
    fname = get_basename(params, outdir) + 'model_comparison.csv'
    table.to_csv(fname, index=False)
    print("\n--- model comparison saved as \n\t %s\n"%fname)
    return 0


def fit_discrete_models(params):
    """
    implementing phylostats fitdiscrete
    """
    try:
        td = load_tree_data(params)
        attr = select_attribute(params, td.data)
        trait = td.trait(attr)
        if params.discretize:
            trait = median_discretize(trait)
            print("Discretized '%s' at its median into states "%attr + ", ".join(map(str, sorted(trait.unique()))))
        fitter = DiscreteModelFit(td.tree, trait, missing_data=params.missing_data, verbose=params.verbose)
        fits = fitter.fit_all(params.models)
    except (ValueError, PhyloStatsError) as e:
        print(e, file=sys.stderr)
        print("Model fitting failed, check error messages above and your input data.", file=sys.stderr)
        return 1

    print("\nFits of discrete trait models to '%s':\n"%attr)
    for fit in fits.values():
        print(fit)
    table = aic_weights(fits, criterion=params.criterion)
    print(table.to_string(index=False))

    outdir = get_outdir(params, '_fitdiscrete')
    basename = get_basename(params, outdir)
    table.to_csv(basename + 'model_comparison.csv', index=False)
    best = fits[table['model'].iloc[0]]
    conf_name = basename + 'ancestral_states.csv'
    best.marginal_ancestral.to_csv(conf_name)
    print("\n--- model comparison saved as \n\t %s"%(basename + 'model_comparison.csv'))
    print("--- marginal ancestral states of the best model (%s) saved as \n\t %s\n"%(best.model, conf_name))
    return 0


def independent_contrasts(params):
    """
    implementing phylostats pic
    """
    try:
        td = load_tree_data(params)
        attr = select_attribute(params, td.data)
        contrasts = pd.DataFrame({attr: pic(td.tree, td.trait(attr))})
        if params.y_attribute:
            contrasts[params.y_attribute] = pic(td.tree, td.trait(params.y_attribute))
    except (ValueError, PhyloStatsError) as e:
        print(e, file=sys.stderr)
        return 1

    if params.y_attribute:
        fit = contrast_regression(td.tree, td.trait(attr), td.trait(params.y_attribute))
        print("\nRegression of contrasts of '%s' on '%s' through the origin:\n"%(params.y_attribute, attr))
        print(fit.summary())

    outdir = get_outdir(params, '_pic')
    fname = get_basename(params, outdir) + 'contrasts.csv'
    contrasts.to_csv(fname)
    print("\n--- independent contrasts saved as \n\t %s\n"%fname)
    return 0
