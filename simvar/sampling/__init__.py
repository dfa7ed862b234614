"""
Genotype sampling and spike-in merging.
"""
