"""Reference physics models.

Simple deterministic cross sections with kinematically consistent event
construction, enough to run the packaged generator list profiles end to
end. Importing this package registers the models with the assembler:

    qel    quasi-elastic (CC, NC)
    res    Delta(1232) resonance production (CC, NC)
    dis    deep-inelastic scattering (CC, NC)
    glres  Glashow resonance (CC)
"""

from nuevg.generators.assembler import register_model
from nuevg.physics.dis import DISXSec, make_dis_generator
from nuevg.physics.glres import GLRESXSec, make_glres_generator
from nuevg.physics.qel import QELXSec, make_qel_generator
from nuevg.physics.res import RESXSec, make_res_generator

register_model("qel", make_qel_generator)
register_model("res", make_res_generator)
register_model("dis", make_dis_generator)
register_model("glres", make_glres_generator)

__all__ = [
    "QELXSec",
    "RESXSec",
    "DISXSec",
    "GLRESXSec",
    "make_qel_generator",
    "make_res_generator",
    "make_dis_generator",
    "make_glres_generator",
]
