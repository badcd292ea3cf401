"""
Practice session engine: queue building, live requeue, undo and
client-local snapshot persistence.

Entry point is practice.session.manager.SessionQueueManager.
"""
