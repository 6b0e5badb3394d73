"""Room services: registry, seating, snapshots and the action pipeline.

These modules hold the room-scoped synchronization logic and are imported
by the Socket.IO handlers, keeping transport concerns separated from room
bookkeeping and document mutation.
"""
