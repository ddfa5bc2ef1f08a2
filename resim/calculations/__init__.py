"""
Financial Calculation Engine

Pure, deterministic calculation modules for simulating a leveraged rental
property investment. No I/O happens here.
"""

from resim.calculations import amortization, breakeven, simulation
from resim.calculations.simulation import run_simulation, SimulationInputError

__all__ = ["amortization", "breakeven", "simulation", "run_simulation", "SimulationInputError"]
