import os
import numpy as np

from timeit import default_timer as timer
from tqdm.autonotebook import tqdm

from .interaction_logs import INDIRECT
from .si_dynamics import DirectSIMap, IndirectSIMap, INFECTED, seeded_state
from .temporal_interactions import InfectedTimeTable
from .time_series import TrajectoryRecorder
from .utilities import print_info_module, random_generator

# enough significant digits to round-trip times of long logs
TIME_FORMAT = '%.10g'


def simulate_map(state_function, initial_state, n_steps, rng, recorder):
    """
    Iterate a discrete-time map and record every snapshot

    Snapshot 0 is `initial_state`; snapshot t+1 is
    state_function.step(snapshot t, t, rng).

    Input:
        state_function (SIMap): one-timestep transition
        initial_state (np.array): (N,) states at timestep 0
        n_steps (int): number of timesteps
        rng (np.random.Generator): random stream
        recorder (TrajectoryRecorder): receives n_steps + 1 snapshots

    Output:
        final_state (np.array): (N,) states after n_steps
    """
    state = initial_state
    recorder.push_back(state)

    for t in range(n_steps):
        state = state_function.step(state, t, rng)
        recorder.push_back(state)

    return state


class SimulationContext:
    """
    Everything shared by the runs of a batch: the interaction index, the
    transition map (with the infected time table it writes into), and the
    random stream
    """
    def __init__(self,
                 interaction_index,
                 state_function,
                 rng):

        self.interaction_index = interaction_index
        self.state_function = state_function
        self.rng = rng

    @classmethod
    def from_parameters(cls, interaction_index, parameters):
        """
        Build the context for `parameters` over an already loaded index
        """
        infected_times = InfectedTimeTable(len(interaction_index))

        if parameters.log_format == INDIRECT:
            state_function = IndirectSIMap(interaction_index,
                                           parameters.prob_si,
                                           parameters.timestep,
                                           infected_times,
                                           decay_rate = parameters.decay_rate)
        else:
            state_function = DirectSIMap(interaction_index,
                                         parameters.prob_si,
                                         parameters.timestep,
                                         infected_times)

        return cls(interaction_index, state_function, random_generator(parameters.seed))

    @property
    def infected_times(self):
        return self.state_function.infected_times

    @property
    def size(self):
        return len(self.interaction_index)

    @property
    def timestep(self):
        return self.state_function.timestep


class EnsembleResult:
    """
    All runs simulated from one seed node
    """
    def __init__(self,
                 seed_node,
                 times,
                 trajectories,
                 infected_times):
        """
        Args
        ----

        seed_node (int): 0-based initially infected node

        times (np.array): (n_steps + 1,) simulation time of every snapshot

        trajectories (np.array): (runs, n_steps + 1, N) states

        infected_times (np.array): (runs, N) first infection time per node,
                                   NEVER_INFECTED if the node stayed susceptible
        """
        self.seed_node = seed_node
        self.times = times
        self.trajectories = trajectories
        self.infected_times = infected_times

    @property
    def runs(self):
        return self.trajectories.shape[0]

    def get_infected_counts(self):
        """
        Output:
            infected_counts (np.array): (runs, n_steps + 1) infected per snapshot
        """
        return (self.trajectories == INFECTED).sum(axis=2)

    def get_final_sizes(self):
        """
        Output:
            final_sizes (np.array): (runs,) infected at the last snapshot
        """
        return self.get_infected_counts()[:, -1]

    def output_rows(self, out_freq):
        """
        Rows of every out_freq-th snapshot (and always the last one) of every run

        Each row is (run number starting at 1, time, state_0, ..., state_{N-1}).

        Output:
            rows (list): list of tuples
        """
        n_snapshots = self.times.size
        last = n_snapshots - 1
        snapshots = [j for j in range(n_snapshots) if j % out_freq == 0 or j == last]

        rows = []
        for run in range(self.runs):
            for j in snapshots:
                rows.append((run + 1, self.times[j])
                            + tuple(int(x) for x in self.trajectories[run, j]))

        return rows


def result_filename(prefix, seed_node):
    return "{}ANT-{:d}.txt".format(prefix, seed_node + 1)

def infected_times_filename(prefix, seed_node):
    return "{}ANT-{:d}-infected-times.txt".format(prefix, seed_node + 1)

def write_result(result, prefix, out_freq):
    """
    Write the trajectories and infected times of one seed node

    Input:
        result (EnsembleResult): all runs of one seed node
        prefix (str): output path prefix
        out_freq (int): output frequency in timesteps

    Output:
        filenames (tuple): paths of the trajectory and infected time files
    """
    directory = os.path.dirname(prefix)
    if directory:
        os.makedirs(directory, exist_ok=True)

    n_nodes = result.trajectories.shape[2]
    rows = np.array(result.output_rows(out_freq), dtype=float).reshape(-1, 2 + n_nodes)

    trajectory_file = result_filename(prefix, result.seed_node)
    np.savetxt(trajectory_file,
               rows,
               fmt=['%d', TIME_FORMAT] + ['%d'] * n_nodes,
               delimiter=',')

    times_file = infected_times_filename(prefix, result.seed_node)
    np.savetxt(times_file, result.infected_times, fmt=TIME_FORMAT, delimiter=',')

    return trajectory_file, times_file


class EnsembleSimulator:
    """
    Runs ensembles of independent SI trajectories, one ensemble per seed node.

    All runs and seed nodes draw from the single random stream of the context,
    so a run is only reproducible by replaying the whole batch in order.
    """
    def __init__(self,
                 context,
                 verbose = True):

        self.context = context
        self.verbose = verbose

    def run_seed(self, seed_node, runs, n_steps):
        """
        Simulate `runs` trajectories of `n_steps` timesteps from one seed node

        Args
        ----

        seed_node (int): 0-based node infected at time 0

        runs (int): number of Monte Carlo runs

        n_steps (int): timesteps per run

        Returns
        -------

        result (EnsembleResult)
        """
        context = self.context
        size = context.size

        if not 0 <= seed_node < size:
            raise IndexError("seed node out of range; seed node: " + str(seed_node))

        initial_state = seeded_state(size, seed_node)
        recorder = TrajectoryRecorder(n_steps, size)

        trajectories = np.zeros( (runs, n_steps + 1, size), dtype=initial_state.dtype )
        infected_times = np.zeros( (runs, size) )

        start_ensemble = timer()

        for run in tqdm(range(runs),
                        desc = 'Seed node {:d}'.format(seed_node + 1),
                        leave = False,
                        disable = not self.verbose):

            # per-run state must not leak between runs
            context.infected_times.reset()
            context.infected_times.set_infected_time(seed_node, 0.0)
            recorder.reset()

            simulate_map(context.state_function,
                         initial_state.copy(),
                         n_steps,
                         context.rng,
                         recorder)

            trajectories[run] = recorder.get_trajectory()
            infected_times[run] = context.infected_times.as_array()

        end_ensemble = timer()

        times = context.timestep * np.arange(n_steps + 1)
        result = EnsembleResult(seed_node, times, trajectories, infected_times)

        if self.verbose:
            self.report(result, end_ensemble - start_ensemble)

        return result

    def run_all(self, seed_nodes, runs, n_steps):
        """
        Yield the EnsembleResult of every seed node in turn
        """
        for seed_node in seed_nodes:
            yield self.run_seed(seed_node, runs, n_steps)

    def report(self, result, wall_time):
        if result.runs > 0:
            final_sizes = result.get_final_sizes()
            print_info_module(
                    __name__,
                    "seed node {:d}: mean final size {:.2f} of {:d} ({:d} runs)".format(
                        result.seed_node + 1,
                        final_sizes.mean(),
                        self.context.size,
                        result.runs))

        print_info_module(
                __name__,
                "[ Wall time ] Ensemble simulation: {:.4f} s".format(wall_time))
