"""
Exception types raised by the simulator.

- SimulationError: base class; subclasses ValueError so callers that already
  catch ValueError keep working.
- InputIntegrityError: input tables are malformed or fail to join.
- ConfigurationError: a configured parameter is impossible or inconsistent.
- DagOrderError: the declared graph is cyclic or a generation order breaks an edge.

Configuration and DAG errors are raised during setup, before any subject row
is generated, so a failed run never leaves partial output behind.
"""


class SimulationError(ValueError):
    """Base class for simulator errors."""


class InputIntegrityError(SimulationError):
    """
    Raised when a geography input table cannot be used.

    Examples:
        - Missing or duplicated region identifiers
        - Non-numeric or missing population / rank cells
        - Non-positive population
        - No region left after joining the two tables
    """


class ConfigurationError(SimulationError):
    """
    Raised when configuration is invalid.

    Examples:
        - Target prevalence outside [0, 1]
        - Target correlation outside [-1, 1]
        - Fewer providers than regions
        - Coefficient on a parent the DAG does not declare
    """


class DagOrderError(SimulationError):
    """Raised when the causal graph is cyclic or a generation order violates an edge."""
