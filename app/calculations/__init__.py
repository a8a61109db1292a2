"""
ROI Calculation Engine

Pure functions comparing manual and automated invoice processing costs.
"""

from app.calculations import roi

__all__ = ["roi"]
