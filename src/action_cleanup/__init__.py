"""
Server action and route cleanup tool.
"""

__version__ = "1.0.0"
