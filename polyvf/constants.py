"""
Numerical constants and status strings shared by the view factor modules.
"""

import numpy as np

# Machine epsilon for float64; Newton refinement stops once successive
# iterates differ by no more than this.
EPS = float(np.finfo(float).eps)

DEFAULT_QUADRATURE_ORDER = 7
MAX_NEWTON_ITERATIONS = 100

# Relative tolerance (against the squared polygon extent) below which a
# polygon normal is treated as zero.
DEGENERATE_TOL = 1e-12

# Relative tolerance (against the polygon extent) for the optional
# coplanarity and plane-separation checks.
PLANARITY_TOL = 1e-9

STATUS_OK = "ok"
STATUS_FAILED = "failed"
STATUS_SKIPPED = "skipped"
