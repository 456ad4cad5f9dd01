# analyses/projection_analysis.py

from analyses.base_analysis import BaseAnalysis
from binning.multi_binner import MultiBinner
from utils import prompt_int, prompt_range, prompt_axis_pair, prompt_yn

class ProjectionAnalysis(BaseAnalysis):
    """Several 2D projections of the sample space filled in one pass."""
    def setup(self):
        ndim = prompt_int("How many coordinates does each sample have?", 2, minval=2)
        self.open_reader(ndim)

        self.collector = MultiBinner(ndim)
        nproj = prompt_int("How many 2D projections?", 1, minval=1)
        for p in range(nproj):
            axes = prompt_axis_pair(f"Projection {p + 1}: which two coordinates? (e.g. 0 1)", ndim, (0, 1))
            lower, upper, bins = [], [], []
            for axis in axes:
                lo, hi = prompt_range(f"Projection {p + 1}: range of coordinate {axis} (lower upper):")
                n = prompt_int(f"Projection {p + 1}: number of bins along coordinate {axis}:", 50, minval=1)
                lower.append(lo)
                upper.append(hi)
                bins.append(n)
            self.collector.add_new_member(lower, upper, bins, axes)

        self.output_options()
        self.print_grids = prompt_yn("Print the grids to the terminal?", False)
        self.plot_grids = prompt_yn("Save a plot of each grid?", False)

    def process_block(self, positions, weights):
        self.collector.broadcast_points(positions, weights)

    def postprocess(self):
        for binner in self.collector:
            self.normalize(binner)

        filenames = self.collector.write_all(self.basename, ascii=self.ascii, log_pdf=self.log_pdf)

        for binner, fname in zip(self.collector, filenames):
            a, b = binner.source_axes
            if self.print_grids:
                print(f"\nCoordinates {a} (horizontal) and {b} (vertical):")
                binner.print_bins()
            if self.plot_grids:
                plot_name = fname.rsplit('.', 1)[0] + ".png"
                binner.plot_bins(plot_name, log_pdf=self.log_pdf)
                print(f"Plot saved to '{plot_name}'.")

        print(f"\nProjected densities saved to {', '.join(filenames)}.")

def projection(fin, sample_format, workers=1):
    analysis = ProjectionAnalysis(fin, sample_format, workers)
    analysis.run()
    return analysis
