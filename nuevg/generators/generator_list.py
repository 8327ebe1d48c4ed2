"""Ordered, read-only collection of event generators."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Sequence

from nuevg.generators.base import EventGenerator


class EventGeneratorList(Sequence):
    """Event generators in registration order.

    Registration order is the responsibility chain order. The list is frozen
    once assembled; drivers only read it.
    """

    def __init__(self, generators: Iterable[EventGenerator] = (), profile: str = ""):
        self._generators = tuple(generators)
        self.profile = profile

    def __getitem__(self, index):
        return self._generators[index]

    def __len__(self) -> int:
        return len(self._generators)

    def __iter__(self) -> Iterator[EventGenerator]:
        return iter(self._generators)

    def names(self) -> List[str]:
        return [generator.name for generator in self._generators]

    def get(self, name: str) -> EventGenerator:
        """Generator by name.

        Raises:
            KeyError: If no generator of that name is in the list
        """
        for generator in self._generators:
            if generator.name == name:
                return generator
        raise KeyError(f"Event generator '{name}' not in list. Available: {', '.join(self.names())}")

    def __str__(self) -> str:
        header = f"EventGeneratorList '{self.profile}' ({len(self)} generators)"
        return "\n".join([header] + [f"  [{i}] {g}" for i, g in enumerate(self._generators)])
