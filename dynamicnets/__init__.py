# Files in this project:
#

# Time-ordered interaction records per ordered pair of individuals, with
# interval and exact-timestamp contact queries, and the per-run table of
# first infection times
from .temporal_interactions import TemporalInteractionIndex, InfectedTimeTable, NEVER_INFECTED

# Readers for the direct (crossing) and indirect (location co-occurrence)
# tab-delimited interaction logs
from .interaction_logs import load_direct_log, load_indirect_log, load_interaction_log
from .interaction_logs import InteractionLogError

# One timestep of susceptible -> infected dynamics over an interaction index
from .si_dynamics import DirectSIMap, IndirectSIMap, SUSCEPTIBLE, INFECTED
from .si_dynamics import exponential_decay_weight

# Ensembles of stochastic trajectories per seed node
from .simulation_driver import SimulationContext, EnsembleSimulator, EnsembleResult
from .simulation_driver import simulate_map, write_result
from .time_series import TrajectoryRecorder

# Command line and INI parameters
from .parameters import SimulationParameters
