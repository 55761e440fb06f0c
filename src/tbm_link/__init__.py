"""
TBM Link Bench - Through-Muck Magnetic Induction Link Model

This package contains:
- Physics: Link budget, loop antenna model, wire table, parameter sweeps
- Simulation: Duty-cycled node state machine and fixed-rate clock
- Validation: Parameter clamping and config file checks
- Presets: Named ground / antenna scenarios

Usage:
    # After installing with: pip install -e .
    from tbm_link.physics import ParameterSet, evaluate
    from tbm_link.simulation import SimulationClock, phase
    from tbm_link.validation import validate_parameters
    from tbm_link.config import load_config
"""

__version__ = "0.1.0"
__all__ = ["physics", "simulation", "validation", "presets", "config"]
