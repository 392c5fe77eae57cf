"""Board schemas."""

from pydantic import BaseModel, ConfigDict, Field


class Board(BaseModel):
    """A board as persisted in the ``boards`` hash."""

    name: str = Field(..., description="Human readable board name")
    slug: str = Field(..., min_length=1, description="URL segment derived from the name")
    description: str = Field(default="", description="Short blurb shown on the board index")

    model_config = ConfigDict(extra="ignore")
