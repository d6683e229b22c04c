"""
Solver module for the Str8ts MIP pipeline.

This module provides the engine protocol, the PuLP backend, the solve
driver and the decoder that turns engine values back into a filled grid.
"""
