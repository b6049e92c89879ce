"""Punchclock package.

Clock-in / clock-out punches are stored as events; work sessions, lunch,
expected exit and surplus are always derived from them on read.
"""
