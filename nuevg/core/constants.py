"""Physics constants for neutrino event generation.

This module is the Single Source of Truth (SSOT) for all physics constants
used by the core and the reference physics models. Import from here rather
than defining constants locally.

Units: natural units with energies, momenta and masses in GeV.

Import Policy:
    from nuevg.core.constants import PROTON_MASS, GEV2_TO_CM2

DO NOT use: from nuevg.core.constants import *
"""

import math

# =============================================================================
# Unit Conversions
# =============================================================================

# (hbar c)^2 [GeV^2 cm^2]: a cross section in GeV^-2 times this is in cm^2
GEV2_TO_CM2 = 0.389379372e-27

# =============================================================================
# Coupling Constants
# =============================================================================

# Fermi coupling constant [GeV^-2]
FERMI_CONSTANT = 1.1663787e-5

# cos(Cabibbo angle)
COS_CABIBBO = 0.97420

# sin^2(Weinberg angle)
SIN2_WEINBERG = 0.23122

# =============================================================================
# Particle Masses and Widths [GeV]
# =============================================================================

ELECTRON_MASS = 0.00051099895
MUON_MASS = 0.1056583755
TAU_MASS = 1.77686

PROTON_MASS = 0.93827208816
NEUTRON_MASS = 0.93956542052
NUCLEON_MASS = 0.5 * (PROTON_MASS + NEUTRON_MASS)

CHARGED_PION_MASS = 0.13957039
NEUTRAL_PION_MASS = 0.1349768

W_BOSON_MASS = 80.379
W_BOSON_WIDTH = 2.085

DELTA_1232_MASS = 1.232
DELTA_1232_WIDTH = 0.117

# =============================================================================
# Nuclear Constants
# =============================================================================

# Fermi momentum [GeV] by atomic number (Moniz et al. / Smith-Moniz tables)
FERMI_MOMENTUM_BY_Z = {
    2: 0.169,   # He
    3: 0.165,   # Li
    6: 0.221,   # C
    8: 0.225,   # O
    12: 0.235,  # Mg
    20: 0.251,  # Ca
    26: 0.251,  # Fe
    28: 0.260,  # Ni
    50: 0.245,  # Sn
    82: 0.265,  # Pb
}

# Used for nuclei missing from the table above
DEFAULT_FERMI_MOMENTUM = 0.250

# Deuteron
DEUTERON_FERMI_MOMENTUM = 0.088

# =============================================================================
# Numerical Constants
# =============================================================================

TWO_PI = 2.0 * math.pi
