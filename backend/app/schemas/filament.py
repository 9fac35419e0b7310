from pydantic import BaseModel, Field

DEFAULT_COLOR = "#8884d8"


class FilamentBase(BaseModel):
    """Type check for the fields a client may send.

    The request body itself is what gets stored, so values keep the exact JSON
    types and key order the client used. Unknown fields pass through.
    """

    name: str | None = None
    brand: str | None = None
    material: str | None = None
    color: str | None = None
    notes: str | None = None
    copies: int | None = None
    start_mass: int | float | None = Field(None, alias="startMass")
    current_mass: int | float | None = Field(None, alias="currentMass")

    class Config:
        extra = "allow"
        populate_by_name = True
        strict = True


class FilamentCreate(FilamentBase):
    pass


class FilamentUpdate(FilamentBase):
    pass


class SuccessResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
