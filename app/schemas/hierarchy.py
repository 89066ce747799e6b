from pydantic import BaseModel
from typing import List, Optional


class HierarchyUser(BaseModel):
    id: str
    name: str
    email: str
    position: str = ""

    model_config = {
        "from_attributes": True
    }


class HierarchyNode(BaseModel):
    user_id: str
    name: Optional[str] = None
    subordinates: List["HierarchyNode"] = []


class HierarchyLink(BaseModel):
    superior_id: str
