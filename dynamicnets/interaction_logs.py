import warnings

import numpy as np
import networkx as nx

from .temporal_interactions import TemporalInteractionIndex
from .utilities import print_info_module

DIRECT   = 'direct'
INDIRECT = 'indirect'
LOG_FORMATS = (DIRECT, INDIRECT)

DELIMITER = '\t'
MISSING = 'NA'
COMMENT = '#'

# column layout of the direct (crossing) format
DIRECT_NODE_COLUMN = 0
DIRECT_TIME_COLUMN = 2
DIRECT_N_COLUMNS   = 4

# column layout of the indirect (location co-occurrence) format
INDIRECT_TIME_COLUMN  = 1
INDIRECT_ACTOR_COLUMN = 2
INDIRECT_FIRST_NODE_COLUMN = 3


class InteractionLogError(ValueError):
    """
    An interaction log could not be read or contains a malformed entry

    Rows are 1-based and count data rows only (blank and comment lines are
    skipped, as np.loadtxt does); columns are 1-based.
    """
    def __init__(
            self,
            message,
            filename,
            row=None,
            column=None):
        self.filename = filename
        self.row = row
        self.column = column

        location = str(filename)
        if row is not None:
            location += ", row " + str(row)
        if column is not None:
            location += ", column " + str(column)

        super().__init__(location + ": " + message)


def _read_fields(filename, n_columns):
    """
    Load the first n_columns of every data row as stripped strings

    Output:
        fields (np.array): (n_rows, n_columns) array of str
    """
    try:
        with warnings.catch_warnings():
            # an empty log is a valid log without records
            warnings.simplefilter('ignore', UserWarning)
            fields = np.loadtxt(filename,
                                dtype=str,
                                delimiter=DELIMITER,
                                comments=COMMENT,
                                usecols=list(range(n_columns)),
                                ndmin=2)
    except OSError as e:
        raise InteractionLogError("could not open interaction log", filename) from e
    except ValueError as e:
        raise InteractionLogError(
                "expected at least " + str(n_columns) + " columns; " + str(e),
                filename) from e

    return np.char.strip(fields.reshape(-1, n_columns))

def _convert(fields, dtype, description, filename, first_column):
    """
    Convert a (n_rows, n_columns) block of fields to dtype

    The block starts at column first_column (0-based) of the log; the first
    field that does not convert is reported by its row and column.
    """
    try:
        return fields.astype(dtype)
    except (ValueError, OverflowError):
        pass

    for (row, column), value in np.ndenumerate(fields):
        try:
            dtype(value)
        except (ValueError, OverflowError):
            raise InteractionLogError(
                    "malformed " + description + " " + repr(str(value)),
                    filename, row + 1, first_column + column + 1) from None

    raise InteractionLogError("malformed " + description, filename)

def _check_finite(times, filename, first_column):
    rows, columns = np.nonzero(~np.isfinite(times))
    if rows.size > 0:
        raise InteractionLogError(
                "time is not finite: " + str(times[rows[0], columns[0]]),
                filename, int(rows[0]) + 1, first_column + int(columns[0]) + 1)

def _check_node_range(nodes, size, filename, first_column):
    rows, columns = np.nonzero((nodes < 1) | (nodes > size))
    if rows.size > 0:
        raise InteractionLogError(
                "node id " + str(nodes[rows[0], columns[0]])
                + " outside [1, " + str(size) + "]",
                filename, int(rows[0]) + 1, first_column + int(columns[0]) + 1)

def _parse_times(fields, first_column, filename):
    times = _convert(fields, np.float64, 'time', filename, first_column)
    _check_finite(times, filename, first_column)
    return times

def _parse_nodes(fields, first_column, size, filename):
    """
    Parse 1-based node ids and return them 0-based
    """
    nodes = _convert(fields, np.int64, 'node id', filename, first_column)
    _check_node_range(nodes, size, filename, first_column)
    return nodes - 1


def load_direct_log(
        filename,
        size,
        verbose=False):
    """
    Build a symmetric index from a direct crossing log

    Every line holds four tab-separated fields: from, to, from_time, to_time
    with 1-based node ids.

    Input:
        filename (str): path to the log
        size (int): number of nodes N
        verbose (boolean): print a summary when done

    Output:
        index (TemporalInteractionIndex): symmetric index
    """
    fields = _read_fields(filename, DIRECT_N_COLUMNS)

    nodes = _parse_nodes(fields[:, DIRECT_NODE_COLUMN:DIRECT_TIME_COLUMN],
                         DIRECT_NODE_COLUMN,
                         size,
                         filename)
    times = _parse_times(fields[:, DIRECT_TIME_COLUMN:DIRECT_N_COLUMNS],
                         DIRECT_TIME_COLUMN,
                         filename)

    index = TemporalInteractionIndex(size, symmetric=True)
    for (from_node, to_node), (from_time, to_time) in zip(nodes, times):
        index.add_record(int(from_node), int(to_node), from_time, to_time)

    if verbose:
        print_summary(index, filename)

    return index

def load_indirect_log(
        filename,
        size,
        verbose=False):
    """
    Build an asymmetric index from a location co-occurrence log

    Every line holds: location, time, actor (1-based), and then N columns, one
    per node, each either the time that node was present at the location or
    'NA'. Every non-'NA' column i yields the record actor -> i with
    (from_time = time, to_time = column value).

    Rows must be sorted ascending by time within every (actor, node) cell,
    otherwise InteractionLogError is raised.

    Input:
        filename (str): path to the log
        size (int): number of nodes N
        verbose (boolean): print a summary when done

    Output:
        index (TemporalInteractionIndex): asymmetric index
    """
    fields = _read_fields(filename, INDIRECT_FIRST_NODE_COLUMN + size)

    times  = _parse_times(fields[:, INDIRECT_TIME_COLUMN:INDIRECT_ACTOR_COLUMN],
                          INDIRECT_TIME_COLUMN,
                          filename)
    actors = _parse_nodes(fields[:, INDIRECT_ACTOR_COLUMN:INDIRECT_FIRST_NODE_COLUMN],
                          INDIRECT_ACTOR_COLUMN,
                          size,
                          filename)

    presence = fields[:, INDIRECT_FIRST_NODE_COLUMN:]
    missing = presence == MISSING
    other_times = _parse_times(np.where(missing, '0', presence),
                               INDIRECT_FIRST_NODE_COLUMN,
                               filename)

    index = TemporalInteractionIndex(size, symmetric=False)
    # np.nonzero walks row by row, so records keep the order of the log
    for row, node in zip(*np.nonzero(~missing)):
        index.add_record(int(actors[row, 0]),
                         int(node),
                         times[row, 0],
                         other_times[row, node])

    try:
        index.check_sorted()
    except ValueError as e:
        raise InteractionLogError(str(e), filename) from e

    if verbose:
        print_summary(index, filename)

    return index

def load_interaction_log(
        filename,
        size,
        log_format=DIRECT,
        verbose=False):
    """
    Build an index from a log in either of the supported formats
    """
    if log_format == DIRECT:
        return load_direct_log(filename, size, verbose=verbose)
    elif log_format == INDIRECT:
        return load_indirect_log(filename, size, verbose=verbose)

    raise ValueError(
            "unknown log format " + repr(log_format)
            + "; expected one of " + str(LOG_FORMATS))

def print_summary(index, filename):
    """
    Report the size of a freshly loaded index and of its static aggregate

    Input:
        index (TemporalInteractionIndex): loaded index
        filename (str): path the index was loaded from
    Output:
        None
    """
    adjacency = index.adjacency_matrix()
    contact_network = index.aggregate_contact_network()

    degrees = np.array([degree for _, degree in contact_network.degree()])
    mean_degree = degrees.mean() if degrees.size > 0 else 0.0

    print_info_module(
            __name__,
            "loaded {:d} records over {:d} cells from {}".format(
                int(adjacency.sum()),
                adjacency.nnz,
                filename))
    print_info_module(
            __name__,
            "contact network: {:d} contact pairs, mean degree {:.2f},"
            " {:d} isolated nodes".format(
                contact_network.number_of_edges(),
                mean_degree,
                nx.number_of_isolates(contact_network)))
