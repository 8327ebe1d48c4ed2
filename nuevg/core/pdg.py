"""PDG particle codes and classification helpers.

Import Policy:
    from nuevg.core import pdg
    pdg.is_neutrino(14)
"""

from typing import Optional

from nuevg.core.constants import (
    CHARGED_PION_MASS,
    ELECTRON_MASS,
    MUON_MASS,
    NEUTRAL_PION_MASS,
    NEUTRON_MASS,
    PROTON_MASS,
    TAU_MASS,
    W_BOSON_MASS,
)

# Leptons
NU_E = 12
NU_E_BAR = -12
NU_MU = 14
NU_MU_BAR = -14
NU_TAU = 16
NU_TAU_BAR = -16
ELECTRON = 11
POSITRON = -11
MUON = 13
ANTI_MUON = -13
TAU = 15
ANTI_TAU = -15

# Hadrons
PROTON = 2212
NEUTRON = 2112
PI_PLUS = 211
PI_MINUS = -211
PI_ZERO = 111

# Delta(1232) resonances
DELTA_PLUS_PLUS = 2224
DELTA_PLUS = 2214
DELTA_ZERO = 2114
DELTA_MINUS = 1114

# Gauge bosons
W_MINUS = -24
W_PLUS = 24

# Pseudo-particle standing for an unfragmented hadronic system
HADRONIC_SYSTEM = 2000000001

_NEUTRINOS = (NU_E, NU_MU, NU_TAU)
_ANTI_NEUTRINOS = (NU_E_BAR, NU_MU_BAR, NU_TAU_BAR)

_MASSES = {
    NU_E: 0.0, NU_MU: 0.0, NU_TAU: 0.0,
    ELECTRON: ELECTRON_MASS,
    MUON: MUON_MASS,
    TAU: TAU_MASS,
    PROTON: PROTON_MASS,
    NEUTRON: NEUTRON_MASS,
    PI_PLUS: CHARGED_PION_MASS,
    PI_ZERO: NEUTRAL_PION_MASS,
    W_PLUS: W_BOSON_MASS,
}

_NAMES = {
    NU_E: "nu_e", NU_E_BAR: "nu_e_bar",
    NU_MU: "nu_mu", NU_MU_BAR: "nu_mu_bar",
    NU_TAU: "nu_tau", NU_TAU_BAR: "nu_tau_bar",
    ELECTRON: "e-", POSITRON: "e+",
    MUON: "mu-", ANTI_MUON: "mu+",
    TAU: "tau-", ANTI_TAU: "tau+",
    PROTON: "proton", NEUTRON: "neutron",
    PI_PLUS: "pi+", PI_MINUS: "pi-", PI_ZERO: "pi0",
    W_MINUS: "W-", W_PLUS: "W+",
    DELTA_PLUS_PLUS: "Delta++", DELTA_PLUS: "Delta+",
    DELTA_ZERO: "Delta0", DELTA_MINUS: "Delta-",
    HADRONIC_SYSTEM: "HadrSyst",
}

_ELEMENTS = (
    "n", "H", "He", "Li", "Be", "B", "C", "N", "O", "F", "Ne",
    "Na", "Mg", "Al", "Si", "P", "S", "Cl", "Ar", "K", "Ca",
    "Sc", "Ti", "V", "Cr", "Mn", "Fe", "Co", "Ni", "Cu", "Zn",
)


def is_neutrino(code: int) -> bool:
    return code in _NEUTRINOS


def is_anti_neutrino(code: int) -> bool:
    return code in _ANTI_NEUTRINOS


def is_neutrino_or_anti_neutrino(code: int) -> bool:
    return is_neutrino(code) or is_anti_neutrino(code)


def is_nucleon(code: int) -> bool:
    return code in (PROTON, NEUTRON)


def charged_lepton_partner(nu_code: int) -> int:
    """Charged lepton produced by a CC interaction of the given (anti)neutrino.

    nu_mu (14) -> mu- (13), nu_mu_bar (-14) -> mu+ (-13).
    """
    if not is_neutrino_or_anti_neutrino(nu_code):
        raise ValueError(f"Not a neutrino PDG code: {nu_code}")
    return nu_code - 1 if nu_code > 0 else nu_code + 1


def ion_code(Z: int, A: int) -> int:
    """Ion PDG code 10LZZZAAAI with L = I = 0."""
    return 1000000000 + Z * 10000 + A * 10


def is_ion(code: int) -> bool:
    return code >= 1000000000 and code != HADRONIC_SYSTEM


def ion_z(code: int) -> int:
    return (code // 10000) % 1000


def ion_a(code: int) -> int:
    return (code // 10) % 1000


def mass(code: int) -> float:
    """Rest mass [GeV] for the particles the reference models produce."""
    key = abs(code)
    if key in _MASSES:
        return _MASSES[key]
    raise KeyError(f"No mass known for PDG code {code}")


def name(code: int) -> str:
    """Human readable particle name."""
    if code in _NAMES:
        return _NAMES[code]
    if is_ion(code):
        Z, A = ion_z(code), ion_a(code)
        symbol = _ELEMENTS[Z] if Z < len(_ELEMENTS) else f"Z{Z}"
        return f"{symbol}{A}"
    return str(code)


def lookup_name(code: Optional[int]) -> str:
    return "-" if code is None else name(code)
