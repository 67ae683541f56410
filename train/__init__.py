"""Release train tooling: cut and push versioned train/patch releases."""

__version__ = "0.2.0"
