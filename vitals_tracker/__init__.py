"""
Vitals Tracker: personal blood pressure, glycemia and heart rate log
with date-filtered charts, averages and PDF export.
"""
__version__ = "1.0.0"
