from pydantic import Field

from scribe.domain.note import CamelModel


class User(CamelModel):
    username: str
    password_hash: str = Field(..., description="bcrypt hash, salt included")
