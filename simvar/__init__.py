"""
simvar - synthetic single-sample VCFs from a background population with spiked-in mutations.
"""

__version__ = "0.3.0"
