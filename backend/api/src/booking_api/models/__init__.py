"""API-specific request/response models.

Domain models (Quote, Reservation, CancellationPreview, ...) live in
booking_core.models and are reused here where appropriate.

Modules:
- common: Shared response wrappers and validation error formatting
- quotes: Quote request body
- reservations: Reservation, cancellation and admin request/response models
- payments: Payment callback request body
"""

__all__: list[str] = []
