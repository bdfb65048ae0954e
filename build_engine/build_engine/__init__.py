"""Build controller core: validation chain, pipeline compiler, result extraction."""

__version__ = "0.1.0"
