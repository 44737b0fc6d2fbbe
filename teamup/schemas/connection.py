from pydantic import BaseModel, Field


class ConnectionRequest(BaseModel):
    target_user_id: int = Field(..., ge=1)


class ConnectionActionResponse(BaseModel):
    success: bool = True
    message: str
    is_mutual: bool = False


class ConnectionCount(BaseModel):
    count: int = Field(..., ge=0)
