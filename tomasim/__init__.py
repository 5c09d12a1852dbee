"""Cycle-stepped RV32I out-of-order CPU simulator in the style of Tomasulo's algorithm."""

__version__ = "0.1.0"