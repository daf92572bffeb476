"""Algorithm configuration module.

Examples:
    from covevo.engine.algorithm.config import DynaMOSAConfig

    # Fluent builder
    cfg = DynaMOSAConfig().pop_size(50).max_evaluations(5_000).fixed()

    # Quick defaults
    cfg = DynaMOSAConfig.default(pop_size=50)
"""

from .dynamosa import DynaMOSAConfig, DynaMOSAConfigData

__all__ = ["DynaMOSAConfig", "DynaMOSAConfigData"]
