"""Flux drivers feeding probe 4-momenta to the event generation driver."""

from nuevg.flux.cylindrical import CylindricalBeamFlux

__all__ = ["CylindricalBeamFlux"]
