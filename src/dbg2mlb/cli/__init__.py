"""
dbg2mlb Command-Line Interface
==============================

This package provides the **dbg2mlb** command, a Click-based application
that converts ld65 debug files to Mesen label files.
"""

__all__ = ["dbg2mlb"]
