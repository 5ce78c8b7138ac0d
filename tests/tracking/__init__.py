"""
Deep Diff Tests Package
=======================
Test suite for marker tracking, rendering and the API/CLI front ends.

Run all tests: python3 -m pytest tests/tracking/ -v
Run specific: python3 -m pytest tests/tracking/test_tracker.py -v
"""

__version__ = "1.0.0"
