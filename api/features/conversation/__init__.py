"""Conversation feature package: entities, DTOs, controller, router, and service.

Conversations belong to a single user and hold an ordered message history.
Each user turn is answered by the model gateway; deletion is soft and keeps
the messages in place.
"""
