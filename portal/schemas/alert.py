from pydantic import BaseModel, Field
from typing import Literal

class Alert(BaseModel):
    """Derived UI reminder; never persisted."""
    type: Literal["warning", "info"]
    icon: str
    title: str
    message: str
    link: str
    priority: int = Field(ge=1)  # 1 = most urgent

# Resolve forward references for Pydantic V2
Alert.model_rebuild()
