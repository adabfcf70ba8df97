import numpy as np

from .si_dynamics import STATE_DTYPE


class TrajectoryRecorder:
    """
    Store the state snapshots of a single simulation run

    Think of it as a 2-tensor with:
        - 0th dimension equal to n_steps + 1 (snapshots, including the initial
          state)
        - 1st dimension equal to n_vector (number of nodes)

    The buffer is allocated once and reused by every run through `reset`.
    """

    def __init__(
            self,
            n_steps,
            n_vector):
        """
        Constructor

        Input:
            n_steps (int): number of timesteps per run
            n_vector (int): dimension of the state vector
        """
        if n_steps < 0:
            raise ValueError(
                    self.__class__.__name__
                    + ": n_steps must be non-negative"
                    + "; n_steps: "
                    + str(n_steps))

        self.n_steps  = n_steps
        self.n_vector = n_vector

        self.container = np.zeros( (n_steps + 1, n_vector), dtype=STATE_DTYPE )
        self.end = 0 # points to the past-the-end element

    def __len__(self):
        return self.end

    def __getitem__(
            self,
            timestep):
        """
        A wrapper around get_snapshot; the same docstring applies
        """
        return self.get_snapshot(timestep)

    def get_snapshot(
            self,
            timestep):
        """
        Get the snapshot at a specified timestep

        Input:
            timestep (int): timestep of a snapshot to return

        Output:
            snapshot (np.array): (n_vector,) array of states
        """
        if not 0 <= timestep < self.end:
            raise ValueError(
                    self.__class__.__name__
                    + ": timestep is out of bounds, cannot get_snapshot"
                    + "; timestep: "
                    + str(timestep))

        return self.container[timestep]

    def push_back(
            self,
            snapshot):
        """
        Push a snapshot to the back of the trajectory

        Input:
            snapshot (np.array): (n_vector,) array of states

        Output:
            None
        """
        if self.end > self.n_steps:
            raise ValueError(
                    self.__class__.__name__
                    + ": container is full, cannot push_back"
                    + "; capacity: "
                    + str(self.n_steps + 1))

        self.container[self.end] = snapshot
        self.end += 1

    def get_trajectory(self):
        """
        Get a copy of all recorded snapshots

        Output:
            trajectory (np.array): (len(self), n_vector) array of states
        """
        return self.container[:self.end].copy()

    def reset(self):
        self.container.fill(0)
        self.end = 0
