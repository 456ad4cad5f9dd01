import argparse
import os
import sys
import constants
from analyses.density_analysis import density
from analyses.projection_analysis import projection
from utils import prompt, set_input_file, set_log_file, close_log_file

AVAILABLE_ANALYSES = {
    'nd': ('N-dimensional density grid of the full sample space', density),
    'proj': ('2D projections of the sample space', projection),
}

def determine_sample_format(sample_file):
    _, ext = os.path.splitext(sample_file)
    ext = ext.lower()
    if ext in constants.EXT_TEXT:
        return 'text'
    elif ext in constants.EXT_NPY:
        return 'npy'
    else:
        raise ValueError(f"Unsupported file extension: {ext}")

def choose_analysis():
    print("\nAvailable analyses:")
    for key, (description, _) in AVAILABLE_ANALYSES.items():
        print(f"{key}: {description}")

    while True:
        analysis_choice = prompt("\nChoose an analysis: ")
        if analysis_choice in AVAILABLE_ANALYSES:
            _, analysis_func = AVAILABLE_ANALYSES[analysis_choice]
            return analysis_func
        else:
            print("Invalid choice. Please choose an analysis from the above list.")

def main(sample_file, workers=1):
    sample_format = determine_sample_format(sample_file)
    mode = 'rb' if sample_format == 'npy' else 'r'

    with open(sample_file, mode) as fin:
        print(f"\nReading samples from {sample_file} ({sample_format} format, {workers} worker thread(s))")
        analysis_func = choose_analysis()
        return analysis_func(fin, sample_format, workers)

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Weighted N-dimensional density binning of sample files.")
    parser.add_argument('sample_file', type=str, help="Path to the sample file (.dat/.txt/.xyzw or .npy)")
    parser.add_argument('-i', '--input', type=str, help="Path to the input file")
    parser.add_argument('-l', '--log', type=str, default='input.log', help="Path to the log file")
    parser.add_argument('-j', '--workers', type=int, default=1, help="Number of accumulating worker threads")
    return parser.parse_args(argv)

def cli(argv=None):
    args = parse_args(argv)

    if args.input is not None:
        set_input_file(args.input)

    if args.log is not None:
        set_log_file(args.log)

    try:
        main(args.sample_file, args.workers)
    finally:
        close_log_file()

if __name__ == '__main__':
    sys.exit(cli())
