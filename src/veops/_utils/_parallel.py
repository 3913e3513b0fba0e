"""Dispatch of independent (encoding, timepoint) loop bodies."""

__all__ = ["for_each_pair"]

import concurrent.futures as cf
import itertools

from typing import Callable


def for_each_pair(
    func: Callable[[int, int], None], nenc: int, nt: int, num_workers: int = 1
):
    """
    Call ``func(enc, t)`` for every encoding / timepoint pair.

    Each call must write to its own output slice: no ordering is
    guaranteed when ``num_workers > 1``.

    Parameters
    ----------
    func : Callable[[int, int], None]
        Loop body.
    nenc : int
        Number of vessel encodings.
    nt : int
        Number of timepoints.
    num_workers : int, optional
        Number of threads. The default is ``1`` (serial loop).

    """
    pairs = itertools.product(range(nenc), range(nt))
    if num_workers is None or num_workers <= 1:
        for enc, t in pairs:
            func(enc, t)
        return

    with cf.ThreadPoolExecutor(max_workers=num_workers) as executor:
        futures = [executor.submit(func, enc, t) for enc, t in pairs]
        for future in cf.as_completed(futures):
            future.result()
