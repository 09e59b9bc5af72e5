"""
pulitzer: report index and API documentation generator for REDBUG radio
protocol analyses.
"""

__version__ = "0.1.0"
