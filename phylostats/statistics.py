"""
Classical statistical tests used in the statistics walkthrough.

Normality:
- Shapiro-Wilk test

Two samples:
- t-test (one sample, Welch or Student two sample, paired)
- Wilcoxon signed-rank test (one sample or paired) and Mann-Whitney U test (independent)

Several groups:
- one-way ANOVA with eta-squared effect size, followed by Tukey's HSD
- Kruskal-Wallis test
- MANOVA for several responses

Regression:
- linear models from formulas

Counts:
- chi-square goodness of fit and test of independence

Tests return dictionaries with the test statistic, p-value, the significance
level used and a short interpretation. Model based analyses return the
statsmodels objects so that their summaries can be printed.
"""
from __future__ import print_function, division, absolute_import
import numpy as np
import pandas as pd
from scipy import stats
import statsmodels.api as sm
import statsmodels.formula.api as smf
from statsmodels.stats.multicomp import pairwise_tukeyhsd
from statsmodels.multivariate.manova import MANOVA
from . import config as psconf
from . import MissingDataError
from .utils import make_rng


def _clean(x, name='sample'):
    x = np.asarray(x, dtype=float)
    x = x[~np.isnan(x)]
    if x.size==0:
        raise MissingDataError("no valid (non-NaN) data in %s"%name)
    return x


def _check_columns(data, columns):
    missing = [c for c in columns if c not in data.columns]
    if len(missing):
        raise MissingDataError("column(s) %s not found. Available: %s"%(", ".join(missing), ", ".join(map(str, data.columns))))


def _term(name):
    """quote a column name for use in a formula if it isn't a valid identifier"""
    return name if str(name).isidentifier() else 'Q("%s")'%name


def _significance(test, statistic, p_value, alpha, extra=None):
    is_significant = p_value<=alpha
    if is_significant:
        interpretation = "%s: significant at alpha=%g (p=%.4g). Reject the null hypothesis."%(test, alpha, p_value)
    else:
        interpretation = "%s: not significant at alpha=%g (p=%.4g). Fail to reject the null hypothesis."%(test, alpha, p_value)
    res = {"test": test,
           "statistic": float(statistic),
           "p_value": float(p_value),
           "alpha": alpha,
           "is_significant": bool(is_significant),
           "interpretation": interpretation,
           "summary": "%s: statistic=%.4f, p=%.4g"%(test, statistic, p_value)}
    if extra:
        res.update(extra)
    return res


def shapiro_wilk(x, alpha=psconf.ALPHA):
    """
    Shapiro-Wilk test of normality.

    Null hypothesis (H0): the data are drawn from a normal distribution.
    A p-value <= alpha means the data do not look normally distributed.

    Returns
    -------
    dict
        statistic (W), p_value, is_normal, n_samples, interpretation
    """
    x = _clean(x)
    if x.size<3:
        raise MissingDataError("Shapiro-Wilk test requires at least 3 samples. Found: %d"%x.size)
    statistic, p_value = stats.shapiro(x)
    is_normal = p_value>alpha
    if is_normal:
        interpretation = "Data appear normally distributed (p=%.4f > alpha=%g)."%(p_value, alpha)
    else:
        interpretation = "Data do NOT appear normally distributed (p=%.4f <= alpha=%g)."%(p_value, alpha)
    return {"test": "Shapiro-Wilk",
            "statistic": float(statistic),
            "p_value": float(p_value),
            "alpha": alpha,
            "is_normal": bool(is_normal),
            "n_samples": int(x.size),
            "interpretation": interpretation,
            "summary": "Shapiro-Wilk test: W=%.4f, p=%.4f, normal=%s"%(statistic, p_value, is_normal)}


def t_test(x, y=None, mu=0.0, paired=False, equal_var=False, alpha=psconf.ALPHA):
    """
    t-test for the mean of one sample (against mu), for the difference of the
    means of two independent samples (Welch's test unless equal_var=True), or
    for the mean difference of paired samples.
    """
    if y is None:
        x = _clean(x, 'x')
        statistic, p_value = stats.ttest_1samp(x, mu)
        return _significance("One-sample t-test", statistic, p_value, alpha,
                             {"mean": float(x.mean()), "mu": mu, "df": int(x.size-1)})
    if paired:
        x, y = np.asarray(x, dtype=float), np.asarray(y, dtype=float)
        if x.shape!=y.shape:
            raise MissingDataError("paired t-test needs samples of equal size, got %d and %d"%(x.size, y.size))
        valid = ~(np.isnan(x)|np.isnan(y))
        x, y = x[valid], y[valid]
        if x.size<2:
            raise MissingDataError("paired t-test needs at least 2 complete pairs")
        statistic, p_value = stats.ttest_rel(x, y)
        return _significance("Paired t-test", statistic, p_value, alpha,
                             {"mean_difference": float(np.mean(x-y)), "df": int(x.size-1)})

    x, y = _clean(x, 'x'), _clean(y, 'y')
    if x.size<2 or y.size<2:
        raise MissingDataError("two-sample t-test needs at least 2 observations per sample")
    statistic, p_value = stats.ttest_ind(x, y, equal_var=equal_var)
    pooled_sd = np.sqrt(((x.size-1)*x.var(ddof=1) + (y.size-1)*y.var(ddof=1))/(x.size+y.size-2))
    cohens_d = (x.mean()-y.mean())/pooled_sd if pooled_sd>0 else 0.0
    return _significance("Student t-test" if equal_var else "Welch t-test", statistic, p_value, alpha,
                         {"mean_x": float(x.mean()), "mean_y": float(y.mean()), "cohens_d": float(cohens_d)})


def wilcoxon_test(x, y=None, mu=0.0, paired=False, alpha=psconf.ALPHA):
    """
    Non-parametric alternatives to the t-test: the Wilcoxon signed-rank test
    for one sample (differences to mu) or paired samples, and the
    Mann-Whitney U (Wilcoxon rank-sum) test for two independent samples.
    """
    if y is None or paired:
        x = np.asarray(x, dtype=float)
        d = x - mu if y is None else x - np.asarray(y, dtype=float)
        d = _clean(d, 'differences')
        statistic, p_value = stats.wilcoxon(d)
        return _significance("Wilcoxon signed-rank test", statistic, p_value, alpha,
                             {"median_difference": float(np.median(d))})

    x, y = _clean(x, 'x'), _clean(y, 'y')
    statistic, p_value = stats.mannwhitneyu(x, y, alternative='two-sided')
    return _significance("Mann-Whitney U test", statistic, p_value, alpha,
                         {"median_x": float(np.median(x)), "median_y": float(np.median(y))})


def _groups(data, response, group):
    _check_columns(data, [response, group])
    sub = data[[response, group]].dropna()
    groups = {k:v[response].values for k, v in sub.groupby(group)}
    if len(groups)<2:
        raise MissingDataError("need at least 2 groups in column '%s', got %d"%(group, len(groups)))
    return sub, groups


def one_way_anova(data, response, group, alpha=psconf.ALPHA):
    """
    One-way ANOVA of a response across the levels of a grouping column,
    fit as a linear model.

    Returns
    -------
    dict
        F statistic, p-value, eta_squared, the anova table and the fitted model
    """
    sub, groups = _groups(data, response, group)
    fit = smf.ols('%s ~ C(%s)'%(_term(response), _term(group)), data=sub).fit()
    table = sm.stats.anova_lm(fit, typ=2)
    ss_effect = float(table['sum_sq'].iloc[0])
    ss_resid = float(table['sum_sq'].iloc[-1])
    eta_squared = ss_effect/(ss_effect+ss_resid) if (ss_effect+ss_resid)>0 else 0.0
    return _significance("One-way ANOVA", table['F'].iloc[0], table['PR(>F)'].iloc[0], alpha,
                         {"eta_squared": eta_squared,
                          "n_groups": len(groups),
                          "group_means": {k:float(np.mean(v)) for k, v in groups.items()},
                          "table": table,
                          "model": fit})


def tukey_hsd(data, response, group, alpha=psconf.ALPHA):
    """
    Tukey's honest significant difference test for all pairs of groups.

    Returns
    -------
    pandas.DataFrame
        one row per pair of groups with mean difference, adjusted p-value,
        confidence interval and the decision to reject
    """
    sub, groups = _groups(data, response, group)
    res = pairwise_tukeyhsd(sub[response].values, sub[group].values, alpha=alpha)
    summary = res.summary().data
    return pd.DataFrame(summary[1:], columns=summary[0])


def kruskal_wallis(data, response, group, alpha=psconf.ALPHA):
    """Kruskal-Wallis H test, the rank based alternative to one-way ANOVA"""
    sub, groups = _groups(data, response, group)
    statistic, p_value = stats.kruskal(*groups.values())
    return _significance("Kruskal-Wallis test", statistic, p_value, alpha,
                         {"n_groups": len(groups),
                          "group_medians": {k:float(np.median(v)) for k, v in groups.items()}})


def manova(data, responses, group, alpha=psconf.ALPHA):
    """
    Multivariate analysis of variance of several responses across groups.

    Returns
    -------
    dict
        Pillai's trace and Wilks' lambda with their F approximations, the
        p-value of Pillai's trace and the full statsmodels test table
    """
    _check_columns(data, list(responses)+[group])
    if len(responses)<2:
        raise MissingDataError("MANOVA needs at least two response columns")
    sub = data[list(responses)+[group]].dropna()
    formula = '%s ~ C(%s)'%(' + '.join(_term(r) for r in responses), _term(group))
    res = MANOVA.from_formula(formula, data=sub).mv_test()
    term = [k for k in res.results if k!='Intercept'][0]
    table = res.results[term]['stat']
    pillai = table.loc["Pillai's trace"]
    wilks = table.loc["Wilks' lambda"]
    return _significance("MANOVA (Pillai's trace)", pillai['F Value'], pillai['Pr > F'], alpha,
                         {"pillai": float(pillai['Value']),
                          "wilks_lambda": float(wilks['Value']),
                          "wilks_F": float(wilks['F Value']),
                          "wilks_p_value": float(wilks['Pr > F']),
                          "table": table})


def linear_model(data, formula):
    """
    ordinary least squares fit of a formula like 'y ~ x'

    Returns
    -------
    statsmodels.regression.linear_model.RegressionResultsWrapper
    """
    if len(data)<3:
        raise MissingDataError("linear model needs at least 3 observations, got %d"%len(data))
    return smf.ols(formula, data=data).fit()


def chi_square(observed, expected=None, alpha=psconf.ALPHA):
    """
    Chi-square tests of count data. A one-dimensional table of counts is
    tested for goodness of fit against expected counts or proportions
    (uniform if None). A two-dimensional contingency table is tested for
    independence of rows and columns.
    """
    obs = np.asarray(observed, dtype=float)
    if obs.ndim==1:
        if expected is None:
            exp = np.ones_like(obs)*obs.sum()/obs.size
        else:
            exp = np.asarray(expected, dtype=float)
            if exp.shape!=obs.shape:
                raise MissingDataError("expected counts need the same shape as observed counts")
            # proportions are scaled to the total count
            exp = exp/exp.sum()*obs.sum()
        statistic, p_value = stats.chisquare(obs, exp)
        return _significance("Chi-square goodness of fit", statistic, p_value, alpha,
                             {"df": int(obs.size-1), "expected": exp})
    if obs.ndim==2:
        statistic, p_value, dof, exp = stats.chi2_contingency(obs)
        n = obs.sum()
        cramers_v = np.sqrt(statistic/(n*(min(obs.shape)-1))) if min(obs.shape)>1 else 0.0
        return _significance("Chi-square test of independence", statistic, p_value, alpha,
                             {"df": int(dof), "expected": exp, "cramers_v": float(cramers_v)})
    raise MissingDataError("chi_square: observed counts need to be one or two dimensional")


def simulate_groups(means, n=20, sd=1.0, n_responses=1, rng=None):
    """
    Simulate normally distributed responses for several groups.

    Parameters
    ----------
    means : list, dict
        group means, a list gives groups 'A', 'B', ... Each mean can be a list
        with one value per response.
    n : int
        observations per group
    sd : float
        standard deviation within groups
    n_responses : int
        number of response columns. A single response is called 'value',
        several are called 'y1', 'y2', ...

    Returns
    -------
    pandas.DataFrame
        column 'group' and the response columns
    """
    rng = make_rng(rng)
    if not isinstance(means, dict):
        means = {chr(65+i):m for i, m in enumerate(means)}
    names = ['value'] if n_responses==1 else ['y%d'%(i+1) for i in range(n_responses)]
    frames = []
    for g, m in means.items():
        loc = np.ones(n_responses)*np.asarray(m, dtype=float)
        df = pd.DataFrame(loc + sd*rng.standard_normal((n, n_responses)), columns=names)
        df.insert(0, 'group', g)
        frames.append(df)
    return pd.concat(frames, ignore_index=True)


def simulate_regression(n=50, slope=1.0, intercept=0.0, sd=1.0, rng=None):
    """simulate y = intercept + slope*x + noise with x uniform on [0,10]"""
    rng = make_rng(rng)
    x = rng.uniform(0, 10, size=n)
    return pd.DataFrame({'x':x, 'y':intercept + slope*x + sd*rng.standard_normal(n)})
