from pydantic import BaseModel, Field


# --- Parsing ---

class ParseTextIn(BaseModel):
    text: str = ""


# --- Containers ---

class CreateContainerIn(BaseModel):
    label: str = ""


class LineIn(BaseModel):
    item_label: str = Field("", alias="itemLabel")
    quantity: float

    model_config = {"populate_by_name": True}


class UpdateLineIn(BaseModel):
    item_label: str | None = Field(None, alias="itemLabel")
    quantity: float | None = None

    model_config = {"populate_by_name": True}


# --- Dictation sessions ---

class CreateSessionIn(BaseModel):
    container_id: str | None = Field(None, alias="containerId")

    model_config = {"populate_by_name": True}


class TranscriptIn(BaseModel):
    text: str
