"""
Foundation layer: numeric kernels for ranking, diversity and parent selection.
"""

from .backend import KernelBackend
from .numpy_backend import NumPyKernel
from .registry import KERNELS, resolve_kernel

__all__ = [
    "KernelBackend",
    "NumPyKernel",
    "KERNELS",
    "resolve_kernel",
]
