"""
Income Tracker - Source Package

The core of a personal income-tracking dashboard: dated work entries are
imported, validated, filtered, aggregated and exported.

DESIGN PRINCIPLES:
1. All money is compared in one reference currency
2. Parse and validation errors are collected, never thrown past a pipeline
3. Lenient defaults are named and explicit
4. Every mutation is auditable
5. The entry store is swappable
"""

__version__ = "1.0.0"
__author__ = "Income Tracker Team"
