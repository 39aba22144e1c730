"""
Services Layer

Booking engine services that:
- Receive their Store collaborator explicitly
- Return domain objects (models, dataclasses)
- Raise domain errors from services.errors, never HTTP errors
- Write only through the Store so changes reach live subscribers
"""
