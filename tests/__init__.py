"""Test package for Lapwatch.

Core modules are tested headlessly with a fake millisecond clock.  The
pygame shell is smoke-tested with SDL's dummy video driver so no real window
opens.  Run ``pytest`` from the project root.
"""
