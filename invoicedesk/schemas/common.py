"""Common schemas used across the application.

Documents travel as camelCase JSON while rows and attributes stay
snake_case. The alias generator is the single mapping between the two, so
adding a column never needs a hand-written translation.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class LineItem(CamelModel):
    """One line of an invoice or quotation.

    `id` is assigned by the database; any value sent by the client is
    ignored on write because items are always replaced wholesale.
    """
    id: str | None = None
    description: str = ""
    quantity: int = Field(1, ge=1)
    rate: float = Field(0.0, ge=0)
    amount: float = 0.0


def required_text(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("This field is required")
    return value


class DocumentFields(CamelModel):
    """Fields shared by invoices and quotations."""
    client_name: str = Field(..., max_length=255)
    client_contact: str = ""
    client_address: str = ""
    items: list[LineItem] = Field(..., min_length=1)
    total: float = 0.0
    terms_and_conditions: str = ""
    bank_account_details: str = ""

    @field_validator("client_name")
    @classmethod
    def _client_name_required(cls, v: str) -> str:
        return required_text(v)
