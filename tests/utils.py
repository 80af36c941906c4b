# tests/utils.py
"""
Small, reusable helpers used across the kspectral test suite.

Functions:
- to_numpy(x): detach a tensor (or pass an array through) as a numpy array.
- perm_invariant_accuracy(y_pred, split_index): best accuracy over label swap for 2-way synthetic splits.
- labels_equal_up_to_perm(y1, y2, K): whether two labelings agree after relabeling.
- time_block(label, meta=None): context manager that prints wall-clock time with optional metadata.
- print_timing(label, seconds, **meta): convenience printer for timings (used by time_block).
"""

from __future__ import annotations

import json
import itertools
import time
from contextlib import contextmanager
from typing import Any, Dict, Union

import numpy as np

try:
    import torch
    from torch import Tensor as TorchTensor
except Exception:  # pragma: no cover
    torch = None  # type: ignore
    TorchTensor = None  # type: ignore

ArrayLike = Union[np.ndarray, "TorchTensor"]


def _is_torch(x: Any) -> bool:
    return (torch is not None) and isinstance(x, torch.Tensor)


def to_numpy(x: ArrayLike) -> np.ndarray:
    """Return x as a numpy array (tensors are detached and moved to CPU)."""
    if _is_torch(x):
        return x.detach().cpu().numpy()
    return np.asarray(x)


def perm_invariant_accuracy(y_pred: ArrayLike, split_index: int) -> float:
    """
    Best accuracy over label swaps for 2-way synthetic datasets where the
    first `split_index` points belong to class 0 and the rest to class 1.

    Parameters
    ----------
    y_pred : (n,) predicted integer labels (0/1 or any ints)
    split_index : int, number of points in the first (true) class

    Returns
    -------
    float in [0, 1]
    """
    y_pred = to_numpy(y_pred)
    if y_pred.ndim != 1:
        raise ValueError(f"y_pred must be 1D, got shape {y_pred.shape}")
    n = y_pred.size
    if not (0 <= split_index <= n):
        raise ValueError(f"split_index must be in [0, {n}], got {split_index}")

    first = y_pred[:split_index]
    second = y_pred[split_index:]

    # Map A: first→0, second→1
    acc_a = (np.sum(first == 0) + np.sum(second == 1)) / max(1, n)
    # Map B: first→1, second→0
    acc_b = (np.sum(first == 1) + np.sum(second == 0)) / max(1, n)

    return float(max(acc_a, acc_b))


def labels_equal_up_to_perm(y1: ArrayLike, y2: ArrayLike, K: int) -> bool:
    """Return True if y2 can be relabeled to equal y1 exactly."""
    y1 = to_numpy(y1)
    y2 = to_numpy(y2)
    for perm in itertools.permutations(range(K)):
        mapping = np.array(perm)
        if np.array_equal(y1, mapping[y2]):
            return True
    return False


@contextmanager
def time_block(label: str, meta: Dict[str, Any] | None = None):
    """
    Context manager to time a block and print a single-line summary.

    Example
    -------
    >>> with time_block("fit", {"n": 300, "K": 2, "m": 3}):
    ...     model.fit(X)

    Output
    ------
    [timing] fit {"n":300,"K":2,"m":3} 0.123s
    """
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt = time.perf_counter() - t0
        print_timing(label, dt, **(meta or {}))


def print_timing(label: str, seconds: float, **meta: Any) -> None:
    """
    Print timing in a compact, machine-readable single line.

    Example:
    [timing] fit {"n":300,"K":2,"m":3} 0.123s
    """
    meta_str = ""
    if meta:
        meta_str = " " + json.dumps(meta, separators=(",", ":"), default=str)
    print(f"[timing] {label}{meta_str} {seconds:.3f}s")
