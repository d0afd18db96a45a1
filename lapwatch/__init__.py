"""Lapwatch: stopwatch core with a pygame shell."""
