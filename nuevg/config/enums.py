"""
Configuration Enums for nuevg Event Generation

This module defines the enumeration types used throughout the generator
configuration and the interaction summary.

Import Policy:
    from nuevg.config.enums import ProcessType, InteractionType, KinePhaseSpace

DO NOT use: from nuevg.config.enums import *
"""

from enum import Enum


class ProcessType(Enum):
    """Scattering process of an interaction channel.

    Options:
        QUASI_ELASTIC: Quasi-elastic scattering off a bound or free nucleon
        RESONANT: Baryon resonance production (Delta(1232) in the reference models)
        DEEP_INELASTIC: Deep-inelastic scattering off a nucleon
        GLASHOW_RESONANCE: W- production in anti-nu_e + e- scattering
    """
    QUASI_ELASTIC = "QES"
    RESONANT = "RES"
    DEEP_INELASTIC = "DIS"
    GLASHOW_RESONANCE = "GLR"


class InteractionType(Enum):
    """Current of the exchanged boson.

    Options:
        WEAK_CC: Charged current (W exchange)
        WEAK_NC: Neutral current (Z exchange)
    """
    WEAK_CC = "CC"
    WEAK_NC = "NC"


class KinePhaseSpace(Enum):
    """Kinematic phase space a cross section is differential in.

    Options:
        TOTAL: Integrated cross section for the channel

    Note:
        The driver and the spline cache only need TOTAL. Models offering
        differential cross sections add their own members here.
    """
    TOTAL = "total"


class KnotSpacing(Enum):
    """Spacing of spline knots in energy.

    Options:
        LINEAR: Equal steps in E
        LOGARITHMIC: Equal steps in log(E) (better for wide energy ranges)
    """
    LINEAR = "linear"
    LOGARITHMIC = "logarithmic"
