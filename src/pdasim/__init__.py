"""
pdasim: Pushdown automaton simulation with out-of-order token admission.

Tokens for an input stream may be presented in any order; the engine
buffers and drains them into the transition function exactly as if they
had arrived in sequence.
"""

__version__ = "0.1.0"
