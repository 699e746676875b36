"""
Boundary layer for external system integrations.

Handles all interactions with external systems (the chunk database and the
Google Generative AI embedding and completion APIs).
"""
