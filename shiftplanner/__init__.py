"""Shift planner: genetic search for a month of work shifts that reaches a target balance."""

__version__ = "1.0.0"
