"""API models for payment endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class PaymentCapturedRequest(BaseModel):
    """Payment provider notification that a reservation was paid.

    The amount is the reservation's locked total price, not caller input.
    """

    model_config = ConfigDict(
        strict=False,
        json_schema_extra={"examples": [{"provider_transaction_id": "pi_3Abc123"}]},
    )

    provider_transaction_id: str | None = Field(
        default=None,
        max_length=255,
        description="Provider reference for the captured charge (PaymentIntent ID for Stripe)",
    )
