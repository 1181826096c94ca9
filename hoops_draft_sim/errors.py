"""Typed errors raised by the simulator and its helpers."""
from __future__ import annotations


class SimulationInputError(ValueError):
    """Input the simulator refuses to run on (bad mode, seed or lineup shape)."""


class RosterError(SimulationInputError):
    """A roster file could not be read or contains malformed rows."""
