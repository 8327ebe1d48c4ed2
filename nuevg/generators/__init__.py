"""Event generators: model contracts, generator lists, resolution and selection.

Import Policy:
    from nuevg.generators import EventGenerator, ResponsibilityChain

DO NOT use: from nuevg.generators import *
"""

from nuevg.generators.base import (
    AlgorithmId,
    EventGenerator,
    EventRecordVisitor,
    InteractionListGenerator,
    SplineSettings,
    ValidityContext,
    XSecAlgorithm,
    make_validity,
)
from nuevg.generators.generator_list import EventGeneratorList
from nuevg.generators.responsibility_chain import ResponsibilityChain
from nuevg.generators.selector import InteractionFilter, InteractionSelector, channel_xsec
from nuevg.generators.assembler import (
    EventGeneratorListAssembler,
    available_models,
    register_model,
)

__all__ = [
    "AlgorithmId",
    "XSecAlgorithm",
    "InteractionListGenerator",
    "EventRecordVisitor",
    "ValidityContext",
    "SplineSettings",
    "make_validity",
    "EventGenerator",
    "EventGeneratorList",
    "ResponsibilityChain",
    "InteractionFilter",
    "InteractionSelector",
    "channel_xsec",
    "EventGeneratorListAssembler",
    "register_model",
    "available_models",
]
