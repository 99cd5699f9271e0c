"""
Availability resolution and slot-conflict engine.

Pure, synchronous computation over rows already fetched:
- Calendar arithmetic (calendar_math.py)
- Override-over-recurring schedule resolution (resolver.py)
- Slot candidate generation (slots.py)
- Booking overlap detection (conflicts.py)
"""
