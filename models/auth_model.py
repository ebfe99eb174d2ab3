from pydantic import BaseModel, ConfigDict


class AuthenticatedIdentity(BaseModel):
    """The verified caller, produced once from the access token"""
    model_config = ConfigDict(frozen=True)

    user_id: str
