# app/utils/hierarchy.py
from typing import Dict, List, Optional, Set

from app.models.user import User


class HierarchyManager:
    """Utility class for walking the reports-to hierarchy of a relational store"""

    # Reports-to chains deeper than this are treated as broken data
    MAX_DEPTH = 50

    def __init__(self, store):
        self.store = store

    # Walks read the store's live records; only returned users are copied
    def _user(self, user_id: Optional[str]) -> Optional[User]:
        if not user_id:
            return None
        return self.store.find_user_record(user_id)

    def _reports(self, supervisor_id: str) -> List[User]:
        return [user for user in self.store.user_records() if user.reports_to == supervisor_id]

    def _chain(self, user_id: str) -> List[User]:
        chain = []
        visited = {user_id}
        current_user = self._user(user_id)

        while current_user and current_user.reports_to:
            supervisor = self._user(current_user.reports_to)
            if not supervisor or supervisor.id in visited:
                break
            chain.append(supervisor)
            visited.add(supervisor.id)
            current_user = supervisor

        return chain

    def get_direct_subordinates(self, user_id: str) -> List[User]:
        """Get only direct subordinates for a given user"""
        return [user.model_copy(deep=True) for user in self._reports(user_id)]

    def get_all_subordinates(self, user_id: str) -> List[User]:
        """Get all subordinates (direct and indirect) for a given user"""
        subordinates = []
        visited: Set[str] = set()

        def collect_subordinates(supervisor_id: str):
            if supervisor_id in visited:
                return
            visited.add(supervisor_id)

            for subordinate in self._reports(supervisor_id):
                if subordinate.id in visited:
                    continue
                subordinates.append(subordinate.model_copy(deep=True))
                # Recursively get their subordinates
                collect_subordinates(subordinate.id)

        collect_subordinates(user_id)
        return subordinates

    def get_supervisory_chain(self, user_id: str) -> List[User]:
        """Get the chain of superiors from the user up to the top level"""
        return [supervisor.model_copy(deep=True) for supervisor in self._chain(user_id)]

    def is_subordinate_of(self, user_id: str, potential_supervisor_id: str) -> bool:
        """Check if user_id reports (directly or indirectly) to potential_supervisor_id"""
        return any(supervisor.id == potential_supervisor_id for supervisor in self._chain(user_id))

    def would_create_cycle(self, user_id: str, superior_id: str) -> bool:
        """Check whether making superior_id the superior of user_id would close a loop"""
        if user_id == superior_id:
            return True
        return self.is_subordinate_of(superior_id, user_id)

    def has_cycle(self, user_id: str) -> bool:
        """Check whether following reports-to links from user_id ever revisits a user"""
        visited = set()
        current_user = self._user(user_id)

        while current_user and current_user.reports_to:
            if current_user.id in visited:
                return True
            visited.add(current_user.id)
            current_user = self._user(current_user.reports_to)

        return False

    def get_user_level(self, user_id: str) -> int:
        """Get the hierarchical level of a user (0 = top level)"""
        return min(len(self._chain(user_id)), self.MAX_DEPTH)

    def get_team_hierarchy(self, user_id: str) -> Dict:
        """Get a hierarchical view of the people reporting to a user"""
        visited: Set[str] = set()

        def build_tree(supervisor_id: str) -> Dict:
            visited.add(supervisor_id)
            supervisor = self._user(supervisor_id)
            return {
                "user_id": supervisor_id,
                "name": supervisor.name if supervisor else None,
                "subordinates": [
                    build_tree(sub.id)
                    for sub in self._reports(supervisor_id)
                    if sub.id not in visited
                ]
            }

        return build_tree(user_id)
