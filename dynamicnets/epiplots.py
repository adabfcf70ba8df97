import numpy as np
import matplotlib.pyplot as plt

from .temporal_interactions import NEVER_INFECTED


COLORS_OF_STATUSES = {
        'S': 'C0',
        'I': 'C1'
}


def plot_ensemble_prevalence(
        result,
        population,
        axes=None,
        xlims=None,
        figsize=(15, 4)):
    """
    Plot percentile bands of the susceptible and infected fractions of an
    ensemble, and the distribution of first infection times

    Input:
        result (EnsembleResult): all runs of one seed node
        population (int): total population, used to normalize to [0,1]
        axes (np.array or list): (2,) axes; created if None
    Output:
        axes
    """
    if axes is None:
        fig, axes = plt.subplots(1, 2, figsize = figsize)

    t = result.times
    infected_fraction = result.get_infected_counts() / population
    fractions = {'S': 1 - infected_fraction, 'I': infected_fraction}

    for status, fraction in fractions.items():
        perc = np.percentile(fraction, q = [1, 10, 25, 50, 75, 90, 99], axis = 0)
        color = COLORS_OF_STATUSES[status]

        axes[0].fill_between(t, perc[0], perc[-1], alpha = .2, color = color, linewidth = 0.)
        axes[0].fill_between(t, perc[1], perc[-2], alpha = .2, color = color, linewidth = 0.)
        axes[0].fill_between(t, perc[2], perc[-3], alpha = .2, color = color, linewidth = 0.)
        axes[0].plot(t, perc[3], color = color, label = {'S': 'Susceptible', 'I': 'Infected'}[status])

    axes[0].legend(bbox_to_anchor=(0., 1.02, 1., .102), loc=3,
                   ncol=2, mode="expand", borderaxespad=0.)
    axes[0].set_xlim(xlims)
    axes[0].set_xlabel('Time')

    infected_times = result.infected_times[result.infected_times != NEVER_INFECTED]
    axes[1].hist(infected_times, bins = max(1, t.size - 1), color = COLORS_OF_STATUSES['I'])
    axes[1].set_xlim(xlims)
    axes[1].set_xlabel('First infection time')
    axes[1].set_title('Seed node {:d}'.format(result.seed_node + 1))

    plt.tight_layout()

    return axes

def save_ensemble_prevalence(result, population, filename):
    fig, axes = plt.subplots(1, 2, figsize = (15, 4))
    plot_ensemble_prevalence(result, population, axes = axes)
    fig.savefig(filename)
    plt.close(fig)
