"""
Foundation layer: goals, candidates, collaborator protocols, numeric kernels
and evaluation backends. Nothing here depends on the engine.
"""
