# app/routers/hierarchy.py
from fastapi import APIRouter, Depends, HTTPException
from app.database import get_store
from app.exceptions import StoreError
from app.routers.errors import http_error
from app.schemas.common import success
from app.schemas.hierarchy import HierarchyLink, HierarchyNode, HierarchyUser
from app.store import RelationalStore
from app.utils.hierarchy import HierarchyManager

router = APIRouter()


# 1. Reports-to tree below a user
@router.get("/tree/{user_id}")
def get_hierarchy_tree(user_id: str, store: RelationalStore = Depends(get_store)):
    if not store.get_user_by_id(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    tree = HierarchyManager(store).get_team_hierarchy(user_id)
    return success(HierarchyNode.model_validate(tree))


# 2. Chain of superiors above a user
@router.get("/chain/{user_id}")
def get_supervisory_chain(user_id: str, store: RelationalStore = Depends(get_store)):
    if not store.get_user_by_id(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    chain = HierarchyManager(store).get_supervisory_chain(user_id)
    return success([HierarchyUser.model_validate(user, from_attributes=True) for user in chain])


# 3. Set who a user reports to
@router.put("/{user_id}")
def link_hierarchy(user_id: str, link: HierarchyLink, store: RelationalStore = Depends(get_store)):
    try:
        user = store.link_hierarchy(user_id, link.superior_id)
    except StoreError as e:
        raise http_error(e)
    return success(user, message="Hierarchy updated successfully")
