"""
Honeybee Colony Analysis
Package for cleaning, summarizing and testing U.S. honeybee colony and stressor data.
"""

__version__ = "1.0.0"

# Lazy imports to avoid long startup times (matplotlib)
# Import as needed in code

__all__ = ["config", "io", "cleaning", "aggregation", "inference", "plots", "qc", "report"]
