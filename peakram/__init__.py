"""Peakram is a lightweight tool for measuring the time and memory costs of python code

Peakram measures, for each given expression or function, the elapsed time, the memory retained
after the evaluation and the peak memory transiently allocated during the evaluation. Each unit
is isolated from the rest of the program: the garbage is collected and the peak tracker is reset
before the unit is evaluated, and the garbage is collected again before the final reading.

The measurement can be run from the python (see ``peakram.measure.peak_ram``) returning the
pandas data frame, or from the command line (see ``peakram run --help``) printing the table.
"""
from __future__ import annotations

__version__ = "0.3.0"
