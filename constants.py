# constants.py

import os
import json

# Recognized sample file extensions
EXT_TEXT = ['.dat', '.txt', '.xyzw']
EXT_NPY = ['.npy']

# Output file extensions
EXT_ASCII_OUT = '.dat'
EXT_BINARY_OUT = '.bin'

_DEFAULTS = {
    "LOG_FLOOR_OFFSET": 2.0,
    "LOCK_STRIPES": 64,
    "PROGRESS_INTERVAL": 100,
    "DEFAULT_BLOCK_SIZE": 1000,
}

# Load the configuration
config_file_path = os.path.join(os.path.dirname(__file__), "config.json")
config = dict(_DEFAULTS)
if os.path.exists(config_file_path):
    with open(config_file_path, 'r') as config_file:
        config.update(json.load(config_file))

LOG_FLOOR_OFFSET = float(config["LOG_FLOOR_OFFSET"])
LOCK_STRIPES = int(config["LOCK_STRIPES"])
PROGRESS_INTERVAL = int(config["PROGRESS_INTERVAL"])
DEFAULT_BLOCK_SIZE = int(config["DEFAULT_BLOCK_SIZE"])
