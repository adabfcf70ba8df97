import sys
import numpy as np

LEFT_PAD = 3

# Console reporting

def print_start_of(module_name):
    """
    Announce the start of a stage (module or command)

    Input:
        module_name (str): name of the module
    Output:
        None
    """
    print(" " * LEFT_PAD, end='')
    print(str(module_name) + ": started", flush=True)

def print_end_of(module_name):
    """
    Announce the end of a stage (module or command)

    Input:
        module_name (str): name of the module
    Output:
        None
    """
    print(" " * LEFT_PAD, end='')
    print(str(module_name) + ": ended\n", flush=True)

def print_info_module(
        module_name,
        *args,
        **kwargs):
    """
    Print info in a module

    Input:
        module_name (str): name of the module
        *args, **kwargs: to be passed to the 'print' function
    Output:
        None
    """
    print("*" + " " * (LEFT_PAD - 1) + str(module_name) + ": ", end='')
    print(*args, **kwargs, flush=True)

def print_warning_module(
        module_name,
        *args,
        **kwargs):
    """
    Print warning in a module to stderr

    Input:
        module_name (str): name of the module
        *args, **kwargs: to be passed to the 'print' function
    Output:
        None
    """
    print("!" + " " * (LEFT_PAD - 1) + str(module_name) + ": ",
          end='',
          file=sys.stderr)
    print(*args, **kwargs, file=sys.stderr, flush=True)

# Random number generation

def random_generator(seed=None):
    """
    Create the random stream shared by all runs of a batch

    Input:
        seed (int), None: seed; None draws fresh entropy from the OS
    Output:
        rng (np.random.Generator)
    """
    return np.random.default_rng(seed)
