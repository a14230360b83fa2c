"""
Domain layer: value objects, enums, events and aggregates.

Nothing in this package performs I/O.  Aggregates validate their own
invariants, raise :mod:`.exceptions` on violations and record domain
events into an embedded journal that repositories release after
persisting.
"""
