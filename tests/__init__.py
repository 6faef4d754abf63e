"""
Test suite for dense-linalg

Contains:
- tests/unit/          : Unit tests for individual modules and randomized properties
"""
