"""
Writers for the synthetic VCF and the spike-in log.
"""
