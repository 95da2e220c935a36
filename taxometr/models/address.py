from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

ADDRESS_SEPARATOR = ", "


class Address(BaseModel):
    """Formatted address lines: street, locality, region/country."""

    model_config = ConfigDict(frozen=True)

    lines: List[Optional[str]] = Field(default_factory=list, max_length=3)

    def render(self) -> str:
        return ADDRESS_SEPARATOR.join(line for line in self.lines if line)

    def __str__(self) -> str:
        return self.render()


def render_address(address: Optional[Address]) -> str:
    if address is None:
        return ""
    return address.render()
