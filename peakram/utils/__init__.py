"""Utils contains helper modules, that are not directly dependent on the measurement.

Utils contains various helper modules and functions, like e.g. helper decorators, logs, streams
or exceptions, which are used across all of the peakram modules.
"""
