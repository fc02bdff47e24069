"""
Abstract base class for equipment transfer functions.
"""

from abc import ABC, abstractmethod
from typing import Optional

from actrain.models.air import AirState
from actrain.models.equipment import ProcessOutcome


class EquipmentProcess(ABC):
    """Base class for all equipment transfer functions."""

    @abstractmethod
    def process(
        self,
        inlet: AirState,
        conditions,
        mass_flow: float,
        outlet: AirState,
        pressure_loss: Optional[float],
        pressure: float,
    ) -> ProcessOutcome:
        """
        Map a known inlet state to the outlet state and results.

        `outlet` is the unit's current outlet, carrying any field the user
        drives directly (target temperature or RH). `mass_flow` is the
        dry-air mass flow in kg/s and is always positive here.
        """
        ...
