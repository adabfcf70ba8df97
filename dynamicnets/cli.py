import argparse
import configparser

from timeit import default_timer as timer

from .interaction_logs import LOG_FORMATS, InteractionLogError, load_interaction_log
from .parameters import SimulationParameters
from .epiplots import save_ensemble_prevalence
from .simulation_driver import EnsembleSimulator, SimulationContext, write_result
from .utilities import print_info_module, print_warning_module, print_start_of, print_end_of

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

USAGE = """\
SI Spread Over Dynamic Networks Driven By Data
Usage: dynamicnets FILENAME SIZE SI_PROB ANT RUNS LEN TIMESTEP OUT_FREQ [PREFIX]
       dynamicnets -c CONFIG
  FILENAME:   Interaction data file.
  SIZE:       Number of individuals in data file.
  SI_PROB:    S->I transition probability.
  ANT:        Individual to start infected (-1 = run for all).
  RUNS:       Number of randomised runs.
  LEN:        Timesteps per simulation.
  TIMESTEP:   Length of a time step.
  OUT_FREQ:   Output frequency (timesteps).
  PREFIX:     Prefix for output files.
Options:
  -c, --config FILE              INI file replacing the arguments above
  --log-format {direct,indirect} Layout of FILENAME (default: direct)
  --seed INT                     Seed of the random stream
  --decay-rate FLOAT             Decay of delayed contacts (indirect only)
  --plot                         Save a prevalence plot per seed
  --quiet                        Do not report progress
"""

N_REQUIRED_ARGUMENTS = 8
N_OPTIONAL_ARGUMENTS = 1


class UsageError(Exception):
    """
    The command line does not describe a simulation
    """


class ArgumentParser(argparse.ArgumentParser):
    """
    Report every parsing problem as a usage error
    """
    def error(self, message):
        raise UsageError(message)


def build_parser():
    parser = ArgumentParser(prog='dynamicnets', usage=USAGE, add_help=False)

    parser.add_argument('arguments', nargs='*')

    parser.add_argument('-c', '--config', type=str, default='')
    parser.add_argument('--log-format', type=str, choices=LOG_FORMATS, default=None)
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--decay-rate', type=float, default=None)
    parser.add_argument('--plot', default=False, action='store_true')
    parser.add_argument('--quiet', default=False, action='store_true')
    parser.add_argument('-h', '--help', default=False, action='store_true')

    return parser

def print_usage():
    print(USAGE, end='')

def parameters_from_arguments(arguments):
    """
    Convert the positional command line arguments into SimulationParameters
    """
    n_arguments = len(arguments)
    if not N_REQUIRED_ARGUMENTS <= n_arguments <= N_REQUIRED_ARGUMENTS + N_OPTIONAL_ARGUMENTS:
        raise UsageError("expected {:d} or {:d} arguments, got {:d}".format(
            N_REQUIRED_ARGUMENTS, N_REQUIRED_ARGUMENTS + N_OPTIONAL_ARGUMENTS, n_arguments))

    names = ('FILENAME', 'SIZE', 'SI_PROB', 'ANT', 'RUNS', 'LEN', 'TIMESTEP', 'OUT_FREQ')
    converters = (str, int, float, int, int, int, float, int)

    values = []
    for name, convert, argument in zip(names, converters, arguments):
        try:
            values.append(convert(argument))
        except ValueError:
            raise UsageError("malformed {}: {!r}".format(name, argument)) from None

    prefix = arguments[N_REQUIRED_ARGUMENTS] if n_arguments > N_REQUIRED_ARGUMENTS else ''

    return SimulationParameters(*values, prefix=prefix)

def parse_parameters(args):
    if args.config:
        if args.arguments:
            raise UsageError("positional arguments cannot be combined with --config")
        parameters = SimulationParameters.from_config_file(args.config)
    else:
        parameters = parameters_from_arguments(args.arguments)

    # explicit options take precedence over the configuration file
    if args.log_format is not None:
        parameters.log_format = args.log_format
    if args.seed is not None:
        parameters.seed = args.seed
    if args.decay_rate is not None:
        parameters.decay_rate = args.decay_rate
    if args.plot:
        parameters.plot = True

    return parameters

def run(parameters, verbose=True):
    """
    Load the interaction log, then simulate and write every seed node in turn
    """
    interaction_index = load_interaction_log(parameters.filename,
                                             parameters.size,
                                             log_format = parameters.log_format,
                                             verbose = verbose)

    context = SimulationContext.from_parameters(interaction_index, parameters)
    simulator = EnsembleSimulator(context, verbose = verbose)

    start_batch = timer()

    for result in simulator.run_all(parameters.seed_nodes(), parameters.runs, parameters.n_steps):
        trajectory_file, _ = write_result(result, parameters.prefix, parameters.out_freq)

        if verbose:
            print_info_module(__name__, "wrote", trajectory_file)

        if parameters.plot and result.runs > 0:
            save_ensemble_prevalence(result,
                                     parameters.size,
                                     "{}ANT-{:d}.png".format(parameters.prefix, result.seed_node + 1))

    end_batch = timer()

    if verbose:
        print_info_module(__name__, "[ Wall time ] Batch: {:.4f} s".format(end_batch - start_batch))

def main(argv=None):
    """
    Command line entry point; returns the process exit code
    """
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
        if args.help:
            print_usage()
            return EXIT_SUCCESS
        parameters = parse_parameters(args)
    except UsageError as e:
        print_usage()
        print_warning_module(__name__, e)
        return EXIT_FAILURE
    except (OSError, configparser.Error, ValueError) as e:
        print_warning_module(__name__, e)
        return EXIT_FAILURE

    try:
        parameters.validate()
    except ValueError as e:
        print_warning_module(__name__, "Error:", e)
        return EXIT_FAILURE

    verbose = not args.quiet

    if verbose:
        print_start_of(__name__)

    try:
        run(parameters, verbose = verbose)
    except InteractionLogError as e:
        print_warning_module(__name__, e)
        return EXIT_FAILURE

    if verbose:
        print_end_of(__name__)

    return EXIT_SUCCESS
