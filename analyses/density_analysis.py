# analyses/density_analysis.py

from analyses.base_analysis import BaseAnalysis
from binning.binner_nd import BinnerND
from utils import prompt_int, prompt_range

class DensityAnalysis(BaseAnalysis):
    """Density of the full N-dimensional sample space on one grid."""
    def setup(self):
        ndim = prompt_int("How many coordinates does each sample have?", 2, minval=1)
        self.open_reader(ndim)

        lower, upper, bins = [], [], []
        for axis in range(ndim):
            lo, hi = prompt_range(f"Enter the range of coordinate {axis} (lower upper):")
            n = prompt_int(f"Enter the number of bins along coordinate {axis}:", 50, minval=1)
            lower.append(lo)
            upper.append(hi)
            bins.append(n)

        self.binner = BinnerND(lower, upper, bins)
        self.output_options()

    def process_block(self, positions, weights):
        self.binner.add_points(positions, weights)

    def postprocess(self):
        print(f"Total weight on grid: {self.binner.total():.6g}")
        self.normalize(self.binner)

        fname = f"{self.basename}{self.out_ext}"
        self.binner.write_to_file(fname, ascii=self.ascii, log_pdf=self.log_pdf)
        print(f"\nDensity grid saved to '{fname}'.")

def density(fin, sample_format, workers=1):
    analysis = DensityAnalysis(fin, sample_format, workers)
    analysis.run()
    return analysis
