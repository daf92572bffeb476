"""
Experiment layer: observers that report and persist search runs.
"""
