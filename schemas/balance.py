"""Balance workflow schemas."""

from decimal import Decimal

from pydantic import BaseModel, Field


class CreateCustomerRequest(BaseModel):
    """Request to create a playground customer."""

    name: str = Field(..., description="Customer name")


class CustomerRequest(BaseModel):
    """Request that only names a customer."""

    customer_id: str = Field(default="", description="Stripe customer ID")


class AmountRequest(BaseModel):
    """Request carrying a customer and a dollar amount."""

    customer_id: str = Field(default="", description="Stripe customer ID")
    amount: Decimal | None = Field(default=None, description="Amount in dollars")


class CustomerResponse(BaseModel):
    """Created customer."""

    id: str = Field(..., description="Stripe customer ID")
    email: str | None = Field(default=None, description="Customer email")
    name: str | None = Field(default=None, description="Customer name")


class SetupIntentResponse(BaseModel):
    """Setup intent handed to the browser for client-side confirmation."""

    id: str = Field(..., description="Setup intent ID")
    client_secret: str | None = Field(
        default=None, description="Client secret for Stripe.js"
    )


class BalanceTransactionResponse(BaseModel):
    """Posted balance transaction."""

    id: str = Field(..., description="Balance transaction ID")
    amount: int = Field(..., description="Signed amount in cents")
    currency: str = Field(..., description="Currency")
    description: str | None = Field(default=None, description="Ledger description")


class RecoveredState(BaseModel):
    """Workflow state recovered from redirect query parameters."""

    customer_id: str | None = Field(default=None, description="Current customer")
    payment_method_id: str | None = Field(
        default=None, description="Payment method set as default during recovery"
    )
    setup_completed: bool = Field(
        default=False, description="Whether a hosted setup was completed"
    )
    canceled: bool = Field(
        default=False, description="Whether the user abandoned a hosted flow"
    )


class SetupCompletionResponse(BaseModel):
    """Result of finishing a hosted setup session."""

    session_id: str = Field(..., description="Checkout session ID")
    payment_method_id: str | None = Field(
        default=None, description="Payment method made the customer's default"
    )
    setup_completed: bool = Field(
        default=False, description="Whether a default payment method was set"
    )
