# analyses/base_analysis.py

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, wait, FIRST_COMPLETED

import constants
from core.sample_loader import load_samples
from utils import prompt, prompt_int, prompt_yn, prompt_choice

class BaseAnalysis(ABC):
    """
    Reads a sample file block by block and hands each block to worker threads
    that all accumulate into the same binner(s). Subclasses build the binners
    in setup(), accumulate in process_block() and write results in postprocess().
    """
    def __init__(self, fin, sample_format, workers=1):
        self.fin = fin
        self.sample_format = sample_format
        self.workers = max(1, workers)
        self.reader = None
        self.block_idx = 0
        self.processed_blocks = 0
        self.processed_samples = 0

    def open_reader(self, ndim):
        weighted = prompt_choice("Does the sample file carry a weight column after the coordinates?",
                                 ["auto", "yes", "no"], "auto")
        weighted = {"auto": None, "yes": True, "no": False}[weighted]
        self.reader = load_samples(self.fin, self.sample_format, ndim, weighted)

    def skip_to_start(self):
        if self.start_sample > 1:
            print(f"Skipping forward to sample {self.start_sample}.")
            self.reader.skip(self.start_sample - 1)

    def next_block(self):
        size = self.block_size if self.nsamples < 0 else min(self.block_size, self.nsamples)
        positions, weights = self.reader.read_block(size)
        if self.nsamples > 0:
            self.nsamples -= len(positions)
        return positions, weights

    def run(self):
        self.setup()
        self.setup_sample_loop()
        self.skip_to_start()

        pending = set()
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            try:
                while self.nsamples != 0:
                    try:
                        positions, weights = self.next_block()
                    except EOFError:
                        print("\nEnd of sample file reached.")
                        break

                    pending.add(executor.submit(self.process_block, positions, weights))
                    self.block_idx += 1
                    self.processed_samples += len(positions)

                    if len(pending) >= 2 * self.workers:
                        done, pending = wait(pending, return_when=FIRST_COMPLETED)
                        self._collect(done)

                    if self.block_idx % constants.PROGRESS_INTERVAL == 0:
                        print(f"Read {self.processed_samples} samples ({self.block_idx} blocks)")

            except KeyboardInterrupt:
                print("\nInterrupt received! Exiting main loop and post-processing data...")

            # All producers must finish before the grids are touched again
            done, _ = wait(pending)
            self._collect(done)

        print(f"Accumulated {self.processed_samples} samples in {self.processed_blocks} blocks.")
        self.postprocess()

    def _collect(self, done):
        for future in done:
            future.result()
            self.processed_blocks += 1

    @abstractmethod
    def setup(self):
        pass

    @abstractmethod
    def process_block(self, positions, weights):
        pass

    @abstractmethod
    def postprocess(self):
        pass

    def setup_sample_loop(self):
        self.start_sample = prompt_int("At which sample to start processing the sample file?", 1, minval=1)
        self.nsamples = prompt_int("How many samples to read (from this position on)?", -1, "all")
        self.block_size = prompt_int("How many samples to hand to a worker at once?",
                                     constants.DEFAULT_BLOCK_SIZE, minval=1)

    def output_options(self):
        """Ask how the grids should be normalized and written."""
        self.norm_method = prompt_choice("Normalize the grid to its peak, to unit sum, or not at all?",
                                         ["peak", "sum", "none"], "peak")
        self.ascii = prompt_choice("Output format", ["ascii", "binary"], "ascii") == "ascii"
        self.log_pdf = prompt_yn("Write the log of the density?", True)
        self.basename = prompt("Base name for the output files:", "density")

    def normalize(self, binner):
        if self.norm_method == "none":
            return
        if binner.total() == 0:
            print("Grid is empty, skipping normalization.")
            return
        binner.normalize(to_peak=(self.norm_method == "peak"))

    @property
    def out_ext(self):
        return constants.EXT_ASCII_OUT if self.ascii else constants.EXT_BINARY_OUT
