"""
MemFS Subsystem Lifecycle

Base class shared by long-lived components (the filesystem itself and
the interactive shell) so they expose the same lifecycle:

    1. __init__()   - component is created, holds no state yet
    2. initialize() - component builds its state
    3. start()      - component begins normal operation
    4. stop()       - component stops accepting work

Author: YSNRFD
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from enum import Enum, auto

from memfs.logger import Logger, get_logger


class SubsystemState(Enum):
    """Lifecycle state of a subsystem."""
    CREATED = auto()
    INITIALIZED = auto()
    RUNNING = auto()
    STOPPED = auto()


class Subsystem(ABC):
    """Abstract base class for lifecycle-managed components."""

    def __init__(self, name: str):
        self._name = name
        self._logger = get_logger(name)
        self._state = SubsystemState.CREATED

    @property
    def name(self) -> str:
        """Get the subsystem name."""
        return self._name

    @property
    def state(self) -> SubsystemState:
        """Get the current state."""
        return self._state

    @property
    def logger(self) -> Logger:
        """Get the subsystem logger."""
        return self._logger

    def set_state(self, state: SubsystemState) -> None:
        """Set the subsystem state."""
        self._state = state
        self._logger.debug(f"State changed to {state.name}")

    @abstractmethod
    def initialize(self) -> None:
        """Build the subsystem's initial state."""

    def start(self) -> None:
        """Begin normal operation."""
        self.set_state(SubsystemState.RUNNING)

    def stop(self) -> None:
        """Stop normal operation."""
        self.set_state(SubsystemState.STOPPED)
