"""Resolution of the event generator responsible for an interaction."""

from __future__ import annotations

import logging
from typing import Optional

from nuevg.core.interaction import Interaction
from nuevg.generators.base import EventGenerator
from nuevg.generators.generator_list import EventGeneratorList

logger = logging.getLogger(__name__)


class ResponsibilityChain:
    """First-match scan over an event generator list.

    Pure lookup: nothing is mutated, and "no generator" is a normal return
    value. Callers decide whether that is fatal.
    """

    def __init__(self, generator_list: Optional[EventGeneratorList] = None):
        self.generator_list = generator_list

    def find_generator(self, interaction: Interaction) -> Optional[EventGenerator]:
        """First generator (in registration order) whose validity context accepts the interaction.

        Args:
            interaction: Fully specified interaction, probe 4-momentum bound

        Returns:
            The responsible EventGenerator, or None
        """
        if not self.generator_list:
            logger.debug("Empty event generator list, no generator for %s", interaction)
            return None

        for generator in self.generator_list:
            if generator.validity.accepts(interaction):
                logger.debug("%s handled by %s", interaction.key, generator.name)
                return generator

        logger.debug("No generator accepts %s at E = %g GeV", interaction.key, interaction.probe_energy)
        return None
