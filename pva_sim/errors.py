"""Error taxonomy for PVA-Sim.

Configuration and threshold errors are raised synchronously, before any
sampling starts. Sampling-domain errors abort the whole projection; a
replicate is never silently dropped.
"""

from __future__ import annotations

from typing import Optional


class PVAError(Exception):
    """Base class for all PVA-Sim errors."""


class ConfigurationError(PVAError, ValueError):
    """Invalid SimulationConfig (negative rates, non-positive counts, inverted bounds)."""


class InvalidThresholdError(PVAError, ValueError):
    """Negative quasi-extinction threshold passed to the evaluator."""


class SamplingDomainError(PVAError, RuntimeError):
    """A distribution parameter fell outside its valid domain.

    Attributes:
        reason: Message without the replicate/year location suffix.
        replicate: Replicate index (0-based) when known.
        year: Year (1-based) whose transition was being sampled, when known.
    """

    def __init__(
        self,
        message: str,
        replicate: Optional[int] = None,
        year: Optional[int] = None,
    ):
        self.reason = message
        self.replicate = replicate
        self.year = year
        location = []
        if replicate is not None:
            location.append(f"replicate {replicate}")
        if year is not None:
            location.append(f"year {year}")
        if location:
            message = f"{message} ({', '.join(location)})"
        super().__init__(message)
