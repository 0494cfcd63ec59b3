"""
Awards Engine - award catalog and recipient ledgers.
"""

from unitportal.engines.awards.awards_registry import AwardsRegistry

__all__ = [
    "AwardsRegistry",
]
