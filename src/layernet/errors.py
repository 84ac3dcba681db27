"""
LayerNet Errors Module

This module defines the exceptions raised by the engine. Every concrete error
also derives from ValueError, so code that only knows about ValueError keeps
working.

Classes:
    LayerNetError:      Base class of all engine errors
    ConfigurationError: Invalid topology or parameter configuration (build time)
    ShapeError:         Input/output vector or named value mismatch (per call)
    SerializationError: Malformed or incomplete persisted document
"""

class LayerNetError(Exception):
    """Base class of all errors raised by the engine."""

class ConfigurationError(LayerNetError, ValueError):
    """
    Raised while building a topology or binding parameters.

    Examples: a second input layer, an alias list whose length disagrees with
    the node count, duplicate aliases, an output-only activation attached to an
    intermediate layer.
    """

class ShapeError(LayerNetError, ValueError):
    """
    Raised by forward/train entry points when the supplied values do not fit
    the network (wrong vector length, missing alias, unknown alias).
    """

class SerializationError(LayerNetError, ValueError):
    """
    Raised when a persisted network document cannot be turned back into a
    usable network.
    """
