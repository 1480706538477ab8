"""barkbridge - Lightning node client adapter for the Bark wallet REST API."""

__version__ = "0.1.0"
