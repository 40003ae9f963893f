"""FACEIT team map statistics.

Reconstructs the series a five-person roster played over the last months
and rolls them up into per-map win/loss statistics.
"""

__version__ = "0.1.0"
