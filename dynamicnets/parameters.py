import configparser

from .interaction_logs import DIRECT, INDIRECT, LOG_FORMATS

ALL_SEEDS = -1


class SimulationParameters:
    """
    Everything needed to load an interaction log and run SI ensembles on it
    """

    # INI sections
    NETWORK = 'NETWORK'
    SIMULATION = 'SIMULATION'
    OUTPUT = 'OUTPUT'

    def __init__(
            self,
            filename,
            size,
            prob_si,
            ant,
            runs,
            n_steps,
            timestep,
            out_freq,
            prefix='',
            log_format=DIRECT,
            seed=None,
            decay_rate=None,
            plot=False):
        """
        Constructor

        Input:
            filename (str): interaction log path
            size (int): population size N
            prob_si (float): S->I probability per qualifying contact
            ant (int): 1-based seed node, or -1 to run every node in turn
            runs (int): Monte Carlo runs per seed node
            n_steps (int): timesteps per run
            timestep (float): duration of one timestep
            out_freq (int): write every out_freq-th snapshot (and the last)
            prefix (str): output path prefix
            log_format (str): 'direct' or 'indirect'
            seed (int), None: seed of the random stream
            decay_rate (float), None: decay of delayed contacts (indirect)
            plot (boolean): save a prevalence plot per seed node
        """
        self.filename = filename
        self.size = size
        self.prob_si = prob_si
        self.ant = ant
        self.runs = runs
        self.n_steps = n_steps
        self.timestep = timestep
        self.out_freq = out_freq
        self.prefix = prefix
        self.log_format = log_format
        self.seed = seed
        self.decay_rate = decay_rate
        self.plot = plot

    @classmethod
    def from_config_file(cls, confname):
        """
        Read parameters from an INI file

        Input:
            confname (str): path to the INI file

        Output:
            parameters (SimulationParameters): unvalidated parameters
        """
        config = configparser.RawConfigParser()
        if not config.read(confname):
            raise IOError('File "{0}" not found'.format(confname))

        # missing required options raise configparser.NoOptionError

        # network
        filename   = config.get(cls.NETWORK, 'filename')
        size       = config.getint(cls.NETWORK, 'size')
        log_format = config.get(cls.NETWORK, 'log_format', fallback=DIRECT)

        # simulation
        prob_si  = config.getfloat(cls.SIMULATION, 'si_prob')
        ant      = config.getint(cls.SIMULATION, 'ant', fallback=ALL_SEEDS)
        runs     = config.getint(cls.SIMULATION, 'runs', fallback=1)
        n_steps  = config.getint(cls.SIMULATION, 'len')
        timestep = config.getfloat(cls.SIMULATION, 'timestep', fallback=1.0)
        seed     = config.getint(cls.SIMULATION, 'seed', fallback=None)
        decay_rate = config.getfloat(cls.SIMULATION, 'decay_rate', fallback=None)

        # output
        out_freq = config.getint(cls.OUTPUT, 'out_freq', fallback=1)
        prefix   = config.get(cls.OUTPUT, 'prefix', fallback='')
        plot     = config.getboolean(cls.OUTPUT, 'plot', fallback=False)

        return cls(filename,
                   size,
                   prob_si,
                   ant,
                   runs,
                   n_steps,
                   timestep,
                   out_freq,
                   prefix=prefix,
                   log_format=log_format,
                   seed=seed,
                   decay_rate=decay_rate,
                   plot=plot)

    def validate(self):
        """
        Raise ValueError describing the first invalid parameter
        """
        if self.size < 1:
            raise ValueError("SIZE must be positive; SIZE: " + str(self.size))

        if not 0.0 <= self.prob_si <= 1.0:
            raise ValueError("SI_PROB must be in [0, 1]; SI_PROB: " + str(self.prob_si))

        if self.ant != ALL_SEEDS and not 1 <= self.ant <= self.size:
            raise ValueError("incorrect ant number specified; ANT: " + str(self.ant))

        if self.runs < 0:
            raise ValueError("RUNS must be non-negative; RUNS: " + str(self.runs))

        if self.n_steps < 0:
            raise ValueError("LEN must be non-negative; LEN: " + str(self.n_steps))

        if not self.timestep > 0.0:
            raise ValueError("TIMESTEP must be positive; TIMESTEP: " + str(self.timestep))

        if self.out_freq < 1:
            raise ValueError("OUT_FREQ must be at least 1; OUT_FREQ: " + str(self.out_freq))

        if self.log_format not in LOG_FORMATS:
            raise ValueError("log format must be one of " + str(LOG_FORMATS)
                             + "; log format: " + repr(self.log_format))

        if self.decay_rate is not None:
            if self.log_format != INDIRECT:
                raise ValueError("decay rate only applies to the indirect log format")
            if self.decay_rate < 0.0:
                raise ValueError("decay rate must be non-negative; decay rate: "
                                 + str(self.decay_rate))

    def seed_nodes(self):
        """
        0-based seed nodes to simulate, in order
        """
        if self.ant == ALL_SEEDS:
            return list(range(self.size))

        return [self.ant - 1]
