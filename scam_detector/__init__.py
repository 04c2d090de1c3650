"""
scam_detector — call log & SMS readers with a scam-likelihood heuristic.
"""

__version__ = '1.0.0'
