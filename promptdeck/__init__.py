"""
promptdeck - turns a free-text prompt into a themed, multi-slide deck.
"""

__version__ = "0.1.0"
