#!/usr/bin/env python
import argparse
from .wrappers import simulate_data, reorder_traits, discretize_trait, fit_continuous_models, \
                      fit_discrete_models, independent_contrasts
from . import config as psconf
import phylostats


phylostats_description = \
    "PhyloStats: comparative analysis of traits on phylogenies\n\n"\
    "PhyloStats implements several sub-commands:\n\n"\
    "\t simulate        simulate a tree and Brownian motion traits\n"\
    "\t reorder         put the rows of a trait table in the order of the tips of a tree\n"\
    "\t discretize      split a continuous trait at its median into two codes\n"\
    "\t fitcontinuous   fit and compare BM, OU and EB models of a continuous trait\n"\
    "\t fitdiscrete     fit and compare Mk models of a discrete trait\n"\
    "\t pic             phylogenetically independent contrasts\n"\
    "\t version         print the version\n\n"\
    "'phylostats <command> -h' lists the arguments of each command.\n\n"

tree_description = "Name of file containing the tree in newick or nexus format. "\
    "The taxon names of the tree need to match the names in the trait table."

traits_description = "csv or tsv file with one row per taxon. The taxon name is taken from a column "\
    "called 'name', 'strain', 'accession', 'species' or 'taxon' or from --name-column.\n"\
    "#name,mass,length\ntaxon1,1.3,0.52\n..."

attribute_description = "column of the trait table to analyze. Defaults to the first trait column."


def add_tree_traits_args(parser):
    parser.add_argument('--tree', required=True, type=str, help=tree_description)
    parser.add_argument('--traits', required=True, type=str, help=traits_description)
    parser.add_argument('--name-column', type=str, help="label of the column to be used as taxon name")


def add_common_args(parser):
    parser.add_argument('--verbose', default=1, type=int, help='verbosity of output 0-6')
    parser.add_argument('--outdir', type=str, help='directory to write the output to')
    parser.add_argument('--prefix', type=str, help='prefix of the output file names')


def make_parser():
    parser = argparse.ArgumentParser(description="", usage=phylostats_description)
    subparsers = parser.add_subparsers()

    ## SIMULATION
    s_parser = subparsers.add_parser('simulate',
            description="Simulates a birth-death tree and independent Brownian motion traits on it. "
                        "Writes the tree in newick format and the traits as csv.")
    s_parser.add_argument('--ntips', type=int, default=20, help="number of tips of the simulated tree")
    s_parser.add_argument('--birth-rate', type=float, default=1.0, help="speciation rate")
    s_parser.add_argument('--death-rate', type=float, default=0.0,
                          help="extinction rate, extinct lineages are pruned from the tree. Default 0 (pure birth)")
    s_parser.add_argument('--sigma2', type=float, default=1.0, help="Brownian motion rate of the traits")
    s_parser.add_argument('--ntraits', type=int, default=1, help="number of independent traits")
    s_parser.add_argument('--rng-seed', type=int, help="seed of the random number generator")
    add_common_args(s_parser)
    s_parser.set_defaults(func=simulate_data)

    ## REORDER
    r_parser = subparsers.add_parser('reorder',
            description="Reorders the rows of a trait table to match the order of the tips of the tree. "
                        "Fails if a tip has no row in the table unless --intersect is given.")
    add_tree_traits_args(r_parser)
    r_parser.add_argument('--intersect', action='store_true',
                          help="drop tips without trait data and rows without a tip before reordering")
    add_common_args(r_parser)
    r_parser.set_defaults(func=reorder_traits)

    ## DISCRETIZE
    d_parser = subparsers.add_parser('discretize',
            description="Splits a continuous trait at its median. Values at or above the median "
                        "are coded %d, values below %d. The code --reserved is replaced by --alternate "
                        "such that the output can be used by tools that don't accept it as a state."
                        %(psconf.HIGH_CODE, psconf.LOW_CODE))
    d_parser.add_argument('--traits', required=True, type=str, help=traits_description)
    d_parser.add_argument('--name-column', type=str, help="label of the column to be used as taxon name")
    d_parser.add_argument('--attribute', type=str, help=attribute_description)
    d_parser.add_argument('--reserved', type=int, default=psconf.RESERVED_STATE_CODE,
                          help="state code that is not allowed in the output, default %d"%psconf.RESERVED_STATE_CODE)
    d_parser.add_argument('--alternate', type=int, default=psconf.ALTERNATE_STATE_CODE,
                          help="code used instead of the reserved code, default %d"%psconf.ALTERNATE_STATE_CODE)
    add_common_args(d_parser)
    d_parser.set_defaults(func=discretize_trait)

    ## CONTINUOUS MODELS
    c_parser = subparsers.add_parser('fitcontinuous',
            description="Fits Brownian motion (BM), Ornstein-Uhlenbeck (OU) and early burst (EB) models "
                        "to a continuous trait by maximum likelihood and compares them by AIC weights.")
    add_tree_traits_args(c_parser)
    c_parser.add_argument('--attribute', type=str, help=attribute_description)
    c_parser.add_argument('--models', nargs='+', default=['BM', 'OU', 'EB'], choices=['BM', 'OU', 'EB'],
                          help="models to fit")
    c_parser.add_argument('--criterion', default='aicc', choices=['aic', 'aicc'],
                          help="information criterion used to compute the model weights")
    add_common_args(c_parser)
    c_parser.set_defaults(func=fit_continuous_models)

    ## DISCRETE MODELS
    m_parser = subparsers.add_parser('fitdiscrete',
            description="Fits Mk models with equal rates (ER), symmetric rates (SYM) and all rates "
                        "different (ARD) to a discrete trait and reports marginal ancestral states "
                        "of the best model.")
    add_tree_traits_args(m_parser)
    m_parser.add_argument('--attribute', type=str, help=attribute_description)
    m_parser.add_argument('--models', nargs='+', default=['ER', 'SYM', 'ARD'], choices=['ER', 'SYM', 'ARD'],
                          help="models to fit")
    m_parser.add_argument('--criterion', default='aicc', choices=['aic', 'aicc'],
                          help="information criterion used to compute the model weights")
    m_parser.add_argument('--discretize', action='store_true',
                          help="split a continuous attribute at its median before fitting")
    m_parser.add_argument('--missing-data', type=str, default=psconf.MISSING_DATA,
                          help="string indicating missing data")
    add_common_args(m_parser)
    m_parser.set_defaults(func=fit_discrete_models)

    ## CONTRASTS
    p_parser = subparsers.add_parser('pic',
            description="Computes phylogenetically independent contrasts of a trait. If --y-attribute "
                        "is given, the contrasts of the second trait are regressed on those of the "
                        "first through the origin.")
    add_tree_traits_args(p_parser)
    p_parser.add_argument('--attribute', type=str, help=attribute_description)
    p_parser.add_argument('--y-attribute', type=str, help="second trait, response of the contrast regression")
    add_common_args(p_parser)
    p_parser.set_defaults(func=independent_contrasts)

    # make a version subcommand
    v_parser = subparsers.add_parser('version', description='print version')
    v_parser.set_defaults(func=lambda x: print(phylostats.version) or 0)

    def toplevel(params):
        print(phylostats_description)
        return 0

    parser.set_defaults(func=toplevel)
    return parser
