"""Guest generation - populate events with random guests for load tests.

Pipeline:
- generate_guests: random guests with Faker names
- GuestGenerator: reader -> worker pool -> combiner over the Sweap client
- GenerationResult: aggregated outcome of a run
"""

from .guests import generate_guests
from .pipeline import GenerationMode, GuestGenerator
from .results import GenerationResult, ProcessedBatch

__all__ = [
    "GenerationMode",
    "GenerationResult",
    "GuestGenerator",
    "ProcessedBatch",
    "generate_guests",
]
