"""
Kernel backend registry.

This lightweight registry maps backend names to their kernel classes so that
the search loop can resolve kernels without hard-coding if/elif chains.
The numba backend relies on an optional dependency and is lazy-loaded so
`import covevo` remains safe on a minimal install.
"""

from __future__ import annotations

from difflib import get_close_matches
from importlib import import_module
from collections.abc import Callable
from typing import cast

from covevo.foundation.exceptions import InvalidComponentError

from .backend import KernelBackend
from .numpy_backend import NumPyKernel


def _load_numba() -> KernelBackend:
    try:
        module = import_module("covevo.foundation.kernel.numba_backend")
        return cast(KernelBackend, module.NumbaKernel())
    except ImportError as exc:
        raise ImportError(
            "Kernel 'numba' requires the [compute] extra (numba>=0.57). Install with `pip install -e \".[compute]\"`."
        ) from exc


KERNELS: dict[str, Callable[[], KernelBackend]] = {
    "numpy": NumPyKernel,
    "numba": _load_numba,
}


def _suggest_names(name: str, options: list[str]) -> list[str]:
    if not name or not options:
        return []
    lookup = {option.lower(): option for option in options}
    matches = get_close_matches(name.lower(), lookup.keys(), n=3, cutoff=0.6)
    return [lookup[match] for match in matches]


def resolve_kernel(name: str) -> KernelBackend:
    key = name.lower()
    try:
        factory = KERNELS[key]
    except KeyError as exc:
        available = sorted(KERNELS)
        err = InvalidComponentError("engine", name, available)
        suggestions = _suggest_names(name, available)
        if suggestions:
            err.details["did_you_mean"] = suggestions
        raise err from exc
    return factory()


__all__ = ["KERNELS", "resolve_kernel"]
