import numpy as np

# Index guide for the state vector:
#
# 0: Susceptible
# 1: Infected
SUSCEPTIBLE = 0
INFECTED    = 1

STATE_DTYPE = np.uint8


def exponential_decay_weight(elapsed, decay_rate):
    """
    Weight of a delayed contact; in (0, 1] for elapsed >= 0

    Input:
        elapsed (float): time since the other party was at the location
        decay_rate (float): rate of decay
    """
    return np.exp(-decay_rate * elapsed)

def seeded_state(size, seed_node):
    """
    State vector with only `seed_node` infected
    """
    state = np.zeros(size, dtype=STATE_DTYPE)
    state[seed_node] = INFECTED
    return state


class SIMap:
    """
    One timestep of SI dynamics driven by a temporal interaction index.

    For timestep t the contact window is [t * timestep, (t+1) * timestep).
    Every susceptible node v scans the currently infected nodes in ascending
    order; for each infected node in contact with v one uniform number is
    drawn, and v becomes infected on the first draw <= the transmission
    probability. The next state depends on the current state only.
    """
    def __init__(self,
                 interaction_index,
                 prob_si,
                 timestep,
                 infected_times):
        """
        Args
        ----

        interaction_index (TemporalInteractionIndex): contact data, read only

        prob_si (float): S->I transition probability per qualifying contact

        timestep (float): duration of one timestep in data time units

        infected_times (InfectedTimeTable): receives the window start time of
                                            every new infection
        """
        if not 0.0 <= prob_si <= 1.0:
            raise ValueError("prob_si must be in [0, 1]; prob_si: " + str(prob_si))

        if not timestep > 0.0:
            raise ValueError("timestep must be positive; timestep: " + str(timestep))

        if len(infected_times) != len(interaction_index):
            raise ValueError("infected_times and interaction_index sizes differ")

        self.interaction_index = interaction_index
        self.prob_si = prob_si
        self.timestep = timestep
        self.infected_times = infected_times

    @property
    def size(self):
        return len(self.interaction_index)

    def window(self, t):
        window_start = self.timestep * t
        return window_start, window_start + self.timestep

    def transmission_probability(self, source, target, window_start, window_end):
        """
        Probability that `source` infects `target` during the window, or None
        if the two were not in contact
        """
        raise NotImplementedError

    def step(self, state, t, rng):
        """
        Compute the state after timestep t

        Input:
            state (np.array): (N,) current states, SUSCEPTIBLE or INFECTED
            t (int): timestep index
            rng (np.random.Generator): random stream

        Output:
            new_state (np.array): (N,) states after the timestep
        """
        window_start, window_end = self.window(t)
        new_state = state.copy()

        infected_nodes = np.flatnonzero(state == INFECTED)
        if infected_nodes.size == 0:
            return new_state

        for target in np.flatnonzero(state == SUSCEPTIBLE):
            target = int(target)

            for source in infected_nodes:
                probability = self.transmission_probability(
                        int(source), target, window_start, window_end)
                if probability is None:
                    continue

                # every qualifying contact consumes one draw
                if rng.random() <= probability and probability > 0.0:
                    new_state[target] = INFECTED
                    self.infected_times.set_infected_time(target, window_start)
                    break

        return new_state


class DirectSIMap(SIMap):
    """
    SI dynamics over direct crossings: a contact is any record of the pair
    with either time inside the window
    """
    def transmission_probability(self, source, target, window_start, window_end):
        if self.interaction_index.check_interaction(source, target, window_start, window_end):
            return self.prob_si

        return None


class IndirectSIMap(SIMap):
    """
    SI dynamics over location co-occurrence: a contact is active when the
    susceptible node is observed at a location exactly at the window start and
    the infected node had been there before.

    The exponential decay weight of the delay is applied to the transmission
    probability only if `decay_rate` is given.
    """
    def __init__(self,
                 interaction_index,
                 prob_si,
                 timestep,
                 infected_times,
                 decay_rate=None):

        super().__init__(interaction_index, prob_si, timestep, infected_times)

        if decay_rate is not None and decay_rate < 0.0:
            raise ValueError("decay_rate must be non-negative; decay_rate: " + str(decay_rate))

        self.decay_rate = decay_rate

    def transmission_probability(self, source, target, window_start, window_end):
        elapsed = self.interaction_index.time_since_last_contact(target, source, window_start)
        if elapsed is None:
            return None

        if self.decay_rate is None:
            return self.prob_si

        return self.prob_si * exponential_decay_weight(elapsed, self.decay_rate)
