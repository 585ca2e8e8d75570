"""Common utils contains modules for common functionality for different submodules

In particular, it includes constants shared by logging and views and helper functions for
working with files, units of memory and plural forms of messages.
"""
