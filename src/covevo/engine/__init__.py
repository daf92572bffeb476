"""
Engine layer: the DynaMOSA search loop.

This package contains the algorithm, its configuration and the shared
building blocks under `covevo.engine.algorithm.components`.
"""
