from pydantic import BaseModel, Field, field_validator


class AppSettingsSchema(BaseModel):
    store_name: str = Field(..., min_length=1, description="Shown on the receipt header")
    address: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    receipt_footer: str = Field(..., min_length=1, description="Closing line printed on every receipt")

    @field_validator("store_name", "address", "phone", "receipt_footer", mode="before")
    @classmethod
    def strip_text(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    class Config:
        from_attributes = True
