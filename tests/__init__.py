"""Test suite for georesolve."""
