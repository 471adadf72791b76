"""
RSSalg experiment runner: cross-validation for co-training based learners.
"""

__version__ = "1.0.0"
