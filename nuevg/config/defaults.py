"""
Default Configuration Constants for nuevg Event Generation

This module contains ALL default values used by the driver and its collaborators.
This is the Single Source of Truth (SSOT) for default configuration.

IMPORTANT Import Policies:
    1. DO NOT use: from nuevg.config.defaults import *
       This causes namespace pollution and makes tracking difficult.

    2. DO use explicit imports:
       from nuevg.config.defaults import DEFAULT_SPLINE_KNOTS, DEFAULT_MAX_RETRY_DEPTH

    3. DO NOT define defaults elsewhere. All defaults must be in this file.
"""

# =============================================================================
# Generator List Defaults
# =============================================================================

# Name of the event generator list profile assembled by the driver.
# Profiles are defined in the `generator_lists` section of defaults.yaml.
DEFAULT_GENERATOR_LIST = "Default"

# =============================================================================
# Event Generation Defaults
# =============================================================================

# Maximum number of unphysical events discarded for one generate_event call.
# Exceeding it aborts the run (configuration or physics-model problem).
DEFAULT_MAX_RETRY_DEPTH = 1000

# Unphysical events (e.g. Pauli blocked) are regenerated by default.
# Switch off only for diagnostics: the returned records may be incomplete.
DEFAULT_FILTER_UNPHYSICAL = True

# Seed for the driver's numpy random Generator (None: fresh OS entropy)
DEFAULT_SEED = None

# =============================================================================
# Cross Section Spline Defaults
# =============================================================================

# Number of knots of every per-channel cross section spline
DEFAULT_SPLINE_KNOTS = 40

# Lower floor applied to a generator's validity range when placing knots (GeV)
# Prevents knots at E = 0 where log spacing is undefined.
DEFAULT_SPLINE_E_MIN_FLOOR = 0.01

# Knots spaced in log(E) rather than E when creating per-channel splines
DEFAULT_USE_LOG_ENERGY = True

# Number of knots of the cross section sum spline
DEFAULT_XSEC_SUM_KNOTS = 100

# =============================================================================
# Validation Thresholds
# =============================================================================

# Fewer knots than this is accepted but reported by warn_if_unsafe()
SPLINE_KNOTS_WARN_THRESHOLD = 20

# Retry depths below this are accepted but reported by warn_if_unsafe()
RETRY_DEPTH_WARN_THRESHOLD = 10

# =============================================================================
# Output Units
# =============================================================================

# Cross sections are reported in units of 1e-38 cm2 in logs and tables
XSEC_REPORT_UNIT_CM2 = 1e-38
