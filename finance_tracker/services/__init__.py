"""
Services package.

Clock and identifier capabilities are exported here. Storage and
profiles import the models, so they are imported from their own
subpackages (finance_tracker.services.storage, .profiles).
"""

from finance_tracker.services.clock import Clock, FixedClock, SystemClock
from finance_tracker.services.ids import IdGenerator, generate_id

__all__ = [
    "Clock",
    "FixedClock",
    "IdGenerator",
    "SystemClock",
    "generate_id",
]
