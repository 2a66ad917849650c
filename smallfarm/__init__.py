"""
SmallFarm schedules: crop catalogue, fields/beds and care schedules over REST.
"""

__version__ = "1.0.0"
