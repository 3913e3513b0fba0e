"""SigPy linear operators."""

import warnings

with warnings.catch_warnings():
    warnings.simplefilter("ignore")
    from sigpy.linop import *  # noqa
