"""Formal pipeline invariants.

This file documents what each stage MUST produce. Use it as a reviewer
anchor and system reference; enforcement lives in the assert_* functions.
"""

PIPELINE_INVARIANTS = {
    "frame": [
        "ACRR and QUALITY layers exist with dims (y, x, time)",
        "Layers are float, nulls are NaN",
        "Exactly one time step",
        "Element count equals len(y) * len(x)",
        "Non-null QUALITY lies in [0, 100]",
    ],

    "binary": [
        "Boolean map with the frame's (y, x) shape",
        "No true pixel where ACRR or QUALITY is null",
    ],

    "cells": [
        "Cell ids are 1..N in row-major order of first pixel",
        "Cells are disjoint and contain only true pixels",
        "Without a size filter every true pixel belongs to exactly one cell",
    ],

    "ordering": [
        "Frame results are sorted by strictly ascending timestamp",
    ],
}

# Which contract runs after which stage
STAGE_CONTRACTS = {
    "build": "assert_frame",
    "roi": "assert_frame",
    "binarize": "assert_binary_map",
    "extract": "assert_cells",
    "run": "assert_time_ordered",
}
