"""Simulation package shim.

This module exposes the command-line entry point at `cachesim.simulation` so
`from cachesim.simulation import main` works for scripts and packaging.
"""
from .cli import main

__all__ = ["main"]
