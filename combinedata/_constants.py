"""
Global constants for combinedata.

Organized by: Data Types, Combined Dataset Properties, Defaults, Environment.
"""

import numpy as np

# Data Types
POINT_TYPE = "Points"
"""Data type name of point datasets (the only type that can be combined)."""

SUPPORTED_DATA_TYPES = frozenset({POINT_TYPE})
"""Data types the in-memory repository can create."""


# Combined Dataset Properties
COMBINED_DATASET_IDS_KEY = "Combined Dataset IDs"
"""Property holding the ordered source dataset IDs (order = input order)."""

COMBINED_DATASET_OFFSETS_KEY = "Combined Dataset Offsets"
"""
Property holding the ordered start offsets, one per source dataset.

offsets[i] is the first combined-space point index belonging to input i.
"""


# Defaults
MIN_COMBINE_INPUTS = 2
"""Minimum number of input datasets for a combination to run."""

DEFAULT_COMBINED_NAME = "Combined data"
"""Name given to the combined dataset when none is supplied."""

DEFAULT_PAYLOAD_DTYPE = np.float32
"""Element type of payloads created without explicit data."""

DEFAULT_DIMENSION_PREFIX = "Dim"
"""Prefix for generated dimension names ("Dim 0", "Dim 1", ...)."""

INDEX_DTYPE = np.uint32
"""Element type of point indices in selection maps and offsets."""


# Environment
DEFAULT_NAME_ENV_VAR = "COMBINEDATA_DEFAULT_NAME"
"""Environment variable overriding DEFAULT_COMBINED_NAME."""
