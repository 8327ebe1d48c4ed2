"""Event generation driver."""

from nuevg.driver.driver import EventGenerationDriver, GenerationAttempt, create_driver

__all__ = [
    "EventGenerationDriver",
    "GenerationAttempt",
    "create_driver",
]
