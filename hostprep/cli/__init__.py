"""
Command line interface for hostprep.
"""
