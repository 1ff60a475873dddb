"""
Walk through the statistics half of the workshop: checking normality,
comparing two groups, several groups and several responses, fitting a
linear model and testing count data.
"""
from __future__ import print_function, division
import numpy as np
import matplotlib.pyplot as plt
from phylostats import statistics
from phylostats import plotting

if __name__=='__main__':
    plt.ion()
    rng = np.random.default_rng(7)

    # two groups
    data = statistics.simulate_groups([10.0, 11.5], n=25, sd=2.0, rng=rng)
    a = data.loc[data.group=='A', 'value']
    b = data.loc[data.group=='B', 'value']
    for sample in [a, b]:
        print(statistics.shapiro_wilk(sample)['summary'])
    print(statistics.t_test(a, b)['interpretation'])
    print(statistics.wilcoxon_test(a, b)['interpretation'])
    plotting.plot_qq(a)

    # three groups
    data = statistics.simulate_groups({'control':5.0, 'low':5.5, 'high':7.0}, n=20, rng=rng)
    anova = statistics.one_way_anova(data, 'value', 'group')
    print(anova['table'])
    print("eta squared: %1.3f"%anova['eta_squared'])
    print(statistics.tukey_hsd(data, 'value', 'group'))
    print(statistics.kruskal_wallis(data, 'value', 'group')['interpretation'])
    plotting.plot_groups(data, 'value', 'group')

    # two responses
    data = statistics.simulate_groups([[0, 0], [1, 0], [0, 1]], n=20, n_responses=2, rng=rng)
    print(statistics.manova(data, ['y1', 'y2'], 'group')['table'])

    # regression
    data = statistics.simulate_regression(n=60, slope=0.5, intercept=2.0, rng=rng)
    print(statistics.linear_model(data, 'y ~ x').summary())

    # counts
    print(statistics.chi_square([18, 22, 40])['interpretation'])
    print(statistics.chi_square([[20, 15], [10, 30]])['interpretation'])
