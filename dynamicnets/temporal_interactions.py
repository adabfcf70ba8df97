import numpy as np
import scipy.sparse as scspa
import networkx as nx
from numba import njit

NEVER_INFECTED = -1.0

# shared by all cells without records; shape (0, 2) keeps the kernels typed
EMPTY_RECORDS = np.empty((0, 2))
EMPTY_RECORDS.setflags(write=False)


@njit
def interaction_in_window(records, window_start, window_end):
    """
    Whether any record has one of its two times in [window_start, window_end)
    """
    for k in range(records.shape[0]):
        if window_start <= records[k, 0] < window_end:
            return True
        if window_start <= records[k, 1] < window_end:
            return True

    return False

@njit
def last_record_at_or_before(records, t):
    """
    Index of the last record with from_time <= t in an ascending sequence

    Returns -1 if the sequence is empty or t precedes its first record.
    """
    last = -1
    for k in range(records.shape[0]):
        if records[k, 0] > t:
            break
        last = k

    return last


class TemporalInteractionIndex:
    """
    Time-ordered interaction records for every ordered pair of nodes

    Each cell (from, to) holds a sequence of (from_time, to_time) records in
    insertion order; callers supply logs sorted ascending by from_time.

    In a symmetric index (direct crossings) every record is stored under both
    (from, to) and (to, from); otherwise only (from, to) is populated and the
    direction encodes who observed whom.
    """

    def __init__(
            self,
            size,
            symmetric=True):
        """
        Constructor

        Input:
            size (int): number of nodes N; node ids are 0..N-1
            symmetric (boolean): store each record in both directions
        """
        if size < 0:
            raise ValueError(
                    self.__class__.__name__
                    + ": size must be non-negative"
                    + "; size: "
                    + str(size))

        self.size = int(size)
        self.symmetric = symmetric

        self.__cells  = {} # (from, to) -> list of (from_time, to_time)
        self.__frozen = {} # (from, to) -> (n, 2) np.array, built on demand

    def __len__(self):
        return self.size

    def __check_node(self, node):
        if not 0 <= node < self.size:
            raise IndexError(
                    self.__class__.__name__
                    + ": node out of range"
                    + "; node: "
                    + str(node)
                    + ", size: "
                    + str(self.size))

    def __append(self, pair, record):
        self.__cells.setdefault(pair, []).append(record)
        self.__frozen.pop(pair, None)

    def add_record(
            self,
            from_node,
            to_node,
            from_time,
            to_time):
        """
        Append an interaction record to the cell (from_node, to_node)

        In a symmetric index the identical record is also appended to
        (to_node, from_node).

        Input:
            from_node (int): 0-based id of the first node
            to_node (int): 0-based id of the second node
            from_time (float): time at which from_node was observed
            to_time (float): time at which to_node was observed

        Output:
            None
        """
        self.__check_node(from_node)
        self.__check_node(to_node)

        record = (float(from_time), float(to_time))
        self.__append((from_node, to_node), record)
        if self.symmetric:
            self.__append((to_node, from_node), record)

    def records(self, from_node, to_node):
        """
        Get the records of a cell

        Output:
            records (np.array): (n_records, 2) read-only array of
                                (from_time, to_time) rows
        """
        self.__check_node(from_node)
        self.__check_node(to_node)

        pair = (from_node, to_node)
        if pair not in self.__cells:
            return EMPTY_RECORDS

        frozen = self.__frozen.get(pair)
        if frozen is None:
            frozen = np.array(self.__cells[pair], dtype=float)
            frozen.setflags(write=False)
            self.__frozen[pair] = frozen

        return frozen

    def check_interaction(
            self,
            from_node,
            to_node,
            window_start,
            window_end):
        """
        Whether the pair interacted during [window_start, window_end)

        A record counts if either of its times lies in the window; this is an
        existence test over the whole cell, not a most-recent query.

        Output:
            interacted (boolean)
        """
        records = self.records(from_node, to_node)
        if records.shape[0] == 0:
            return False

        return bool(interaction_in_window(records, window_start, window_end))

    def time_since_last_contact(self, from_node, to_node, t):
        """
        Time elapsed since the other party was at the shared location

        The contact is active only if the latest record with from_time <= t
        has from_time == t exactly; in that case return t - to_time.

        Output:
            elapsed (float) or None if no contact is active at t
        """
        records = self.records(from_node, to_node)
        if records.shape[0] == 0:
            return None

        last = last_record_at_or_before(records, t)
        if last < 0 or records[last, 0] != t:
            return None

        return t - records[last, 1]

    def is_sorted(self, from_node, to_node):
        """
        Whether a cell is sorted ascending by from_time
        """
        from_times = self.records(from_node, to_node)[:, 0]
        return bool(np.all(from_times[:-1] <= from_times[1:]))

    def check_sorted(self):
        """
        Raise ValueError naming the first cell not sorted by from_time
        """
        for pair in sorted(self.__cells):
            if not self.is_sorted(*pair):
                raise ValueError(
                        self.__class__.__name__
                        + ": records are not sorted by from_time"
                        + "; cell: "
                        + str(pair))

    def pairs(self):
        """
        Get all populated cells

        Output:
            pairs (list): sorted list of (from, to) tuples
        """
        return sorted(self.__cells)

    def get_record_count(self, from_node=None, to_node=None):
        """
        Number of records in one cell, or in the whole index if no cell given
        """
        if from_node is None and to_node is None:
            return sum(len(records) for records in self.__cells.values())

        return self.records(from_node, to_node).shape[0]

    def adjacency_matrix(self):
        """
        Record counts per cell as a sparse matrix

        Output:
            adjacency (scipy.sparse.csr_matrix): (N, N) matrix, entry (i,j)
                                                 is the record count of (i,j)
        """
        pairs = self.pairs()
        rows = np.array([pair[0] for pair in pairs], dtype=int)
        cols = np.array([pair[1] for pair in pairs], dtype=int)
        counts = np.array([len(self.__cells[pair]) for pair in pairs], dtype=float)

        return scspa.csr_matrix((counts, (rows, cols)), shape=(self.size, self.size))

    def aggregate_contact_network(self):
        """
        Collapse the time dimension into a weighted static network

        Output:
            graph (nx.Graph or nx.DiGraph): nodes 0..N-1, edge attribute
                                            'weight' is the record count
        """
        graph = nx.Graph() if self.symmetric else nx.DiGraph()
        graph.add_nodes_from(range(self.size))
        graph.add_weighted_edges_from(
                (pair[0], pair[1], len(self.__cells[pair])) for pair in self.pairs())

        return graph


class InfectedTimeTable:
    """
    First infection time of every node within one simulation run
    """

    def __init__(self, size):
        self.infected_time = np.full(size, NEVER_INFECTED)

    def __len__(self):
        return self.infected_time.size

    def __check_node(self, node):
        if not 0 <= node < self.infected_time.size:
            raise IndexError(
                    self.__class__.__name__
                    + ": node out of range"
                    + "; node: "
                    + str(node))

    def get_infected_time(self, node):
        self.__check_node(node)
        return self.infected_time[node]

    def set_infected_time(self, node, time):
        self.__check_node(node)
        self.infected_time[node] = time

    def is_infected(self, node):
        return self.get_infected_time(node) != NEVER_INFECTED

    def reset(self):
        self.infected_time.fill(NEVER_INFECTED)

    def as_array(self):
        return self.infected_time.copy()
