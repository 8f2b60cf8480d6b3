"""Authenticated caller of a booking operation."""

from pydantic import BaseModel, ConfigDict, Field

from .enums import ActorRole


class Actor(BaseModel):
    """Who is acting, as asserted by the authorization collaborator."""

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., min_length=1)
    role: ActorRole = Field(default=ActorRole.USER)

    @property
    def is_admin(self) -> bool:
        return self.role == ActorRole.ADMIN

    @classmethod
    def system(cls) -> "Actor":
        return cls(user_id="system", role=ActorRole.SYSTEM)
