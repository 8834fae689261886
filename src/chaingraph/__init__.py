"""chaingraph - DNSSEC chain-of-trust graphs in the terminal."""

__version__ = "0.1.0"
