"""fleetrel: CI-triggered release orchestrator for balena fleets."""

__version__ = "0.3.0"
