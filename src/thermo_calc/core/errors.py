"""Error types raised by the calculator core and engines."""


class ThermoCalcError(Exception):
    """Base class for calculator errors."""


class InvalidUserInput(ThermoCalcError, ValueError):
    """Raised when operator input cannot be parsed or is not a valid choice."""


class UnknownGas(ThermoCalcError, KeyError):
    """Raised when a gas name is not in the composition catalog."""


class CompositionError(ThermoCalcError, ValueError):
    """Raised when mole fractions are invalid for the equation of state."""


class PropertyComputationFailed(ThermoCalcError, ValueError):
    """Raised when pressure or temperature is outside the engine's valid range."""


class EngineUnavailable(ThermoCalcError, RuntimeError):
    """Raised when the equation-of-state engine fails unexpectedly."""
