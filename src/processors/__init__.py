"""Vault processors: daily inbox, weekly digest, backlog review.

Each processor is independent; the CLI picks one (or runs all three in
order) and hands it a cancellation token.
"""

from vaultdigest.processors.backlog import BacklogProcessor
from vaultdigest.processors.base import Processor
from vaultdigest.processors.daily import DailyProcessor
from vaultdigest.processors.weekly import WeeklyProcessor

__all__ = [
    "BacklogProcessor",
    "DailyProcessor",
    "Processor",
    "WeeklyProcessor",
]
