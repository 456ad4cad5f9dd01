# binning/multi_binner.py

import constants
from binning.binner_2d import Binner2D


class MultiBinner:
    """
    Feeds one stream of samples to several 2D binners.

    Members are held by reference, so the same binner can also belong to
    other collectors or be used directly by the caller.
    """
    def __init__(self, sample_dim: int = None):
        self.sample_dim = sample_dim
        self.members = []

    def __call__(self, pos, weight: float = 1.0):
        self.broadcast(pos, weight)

    def __len__(self):
        return len(self.members)

    def __iter__(self):
        return iter(self.members)

    def add_member(self, binner: Binner2D) -> Binner2D:
        if self.sample_dim is None:
            self.sample_dim = binner.sample_dim
        elif binner.sample_dim != self.sample_dim:
            raise ValueError(
                f"Binner expects {binner.sample_dim}-dimensional samples, "
                f"collector holds {self.sample_dim}-dimensional binners"
            )
        self.members.append(binner)
        return binner

    def add_new_member(self, lower_bound, upper_bound, bin_count, source_axes, sample_dim: int = None) -> Binner2D:
        """Build a Binner2D owned by this collector and return it."""
        if sample_dim is None:
            sample_dim = self.sample_dim
        if sample_dim is None:
            raise ValueError("sample_dim is required for the first member of an empty collector")
        return self.add_member(Binner2D(lower_bound, upper_bound, bin_count, source_axes, sample_dim))

    def broadcast(self, pos, weight: float = 1.0):
        for binner in self.members:
            binner.add_point(pos, weight)

    def broadcast_points(self, positions, weights=None):
        for binner in self.members:
            binner.add_points(positions, weights)

    def clear_all(self):
        for binner in self.members:
            binner.clear()

    def normalize_all(self, to_peak: bool = True):
        for binner in self.members:
            binner.normalize(to_peak)

    def member_count(self) -> int:
        return len(self.members)

    def get_member(self, i: int) -> Binner2D:
        if not 0 <= i < len(self.members):
            raise IndexError(f"Member {i} requested, collector holds {len(self.members)}")
        return self.members[i]

    def member_filenames(self, basename: str, ascii: bool = True) -> list:
        ext = constants.EXT_ASCII_OUT if ascii else constants.EXT_BINARY_OUT
        names = [f"{basename}_{b.source_axes[0]}_{b.source_axes[1]}" for b in self.members]
        filenames = []
        for i, name in enumerate(names):
            if names.count(name) > 1:
                name = f"{name}_{i}"
            filenames.append(name + ext)
        return filenames

    def write_all(self, basename: str, ascii: bool = True, log_pdf: bool = True) -> list:
        filenames = self.member_filenames(basename, ascii)
        for binner, filename in zip(self.members, filenames):
            binner.write_to_file(filename, ascii=ascii, log_pdf=log_pdf)
        return filenames
