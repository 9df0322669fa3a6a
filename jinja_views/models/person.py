"""Person models for the sample pages.

Form fields use the names the templates post (``Name``, ``CheckMe``).
"""

from pydantic import BaseModel, ConfigDict, Field


class Person(BaseModel):
    """Person shown on the person page."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(alias="Name")


class CreatePerson(BaseModel):
    """Posted create-person form."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(default="", alias="Name")
    check_me: bool = Field(default=False, alias="CheckMe")
