# src/atom_sims/core/errors.py

from __future__ import annotations


class AtomSimError(Exception):
    """Base class for recoverable simulation errors."""


class NoLevelLoaded(AtomSimError):
    """Current level requested before any level was selected."""


class InvalidLevelReference(AtomSimError):
    """The level handle does not resolve to loaded level data."""


class NoFurtherLevel(AtomSimError):
    """Advance requested past the last level of the pack."""


class InvalidTransition(AtomSimError):
    def __init__(self, state, trigger):
        self.state = state
        self.trigger = trigger
        super().__init__(f"no transition from {state.value} on {trigger.value}")
