"""Equation-of-state engines."""

from thermo_calc.engine.base import EquationOfStateEngine
from thermo_calc.engine.mock import MockEngine

__all__ = ["EquationOfStateEngine", "MockEngine"]
