"""
Reports-to hierarchy walks over the demo organisation
"""
import pytest

from app.utils.hierarchy import HierarchyManager


@pytest.fixture
def hierarchy(seeded_store):
    return HierarchyManager(seeded_store)


class TestHierarchyManager:

    def test_direct_and_all_subordinates(self, hierarchy):
        assert {u.id for u in hierarchy.get_direct_subordinates("user1")} == {"user2", "user3", "user5"}
        assert {u.id for u in hierarchy.get_all_subordinates("user1")} == {"user2", "user3", "user4", "user5"}
        assert hierarchy.get_all_subordinates("user4") == []

    def test_supervisory_chain_and_level(self, hierarchy):
        assert [u.id for u in hierarchy.get_supervisory_chain("user4")] == ["user2", "user1"]
        assert hierarchy.get_user_level("user1") == 0
        assert hierarchy.get_user_level("user4") == 2

    def test_is_subordinate_of(self, hierarchy):
        assert hierarchy.is_subordinate_of("user4", "user1")
        assert not hierarchy.is_subordinate_of("user1", "user4")
        assert not hierarchy.is_subordinate_of("user4", "user3")

    def test_would_create_cycle(self, hierarchy):
        assert hierarchy.would_create_cycle("user1", "user1")
        assert hierarchy.would_create_cycle("user1", "user4")
        assert not hierarchy.would_create_cycle("user4", "user3")

    def test_team_hierarchy_tree(self, hierarchy):
        tree = hierarchy.get_team_hierarchy("user2")

        assert tree["name"] == "Maria Santos"
        assert [node["user_id"] for node in tree["subordinates"]] == ["user4"]
        assert tree["subordinates"][0]["subordinates"] == []

    def test_broken_data_does_not_loop(self, seeded_store):
        """Walks stop at a user already seen even when stored data holds a cycle"""
        users = seeded_store.users
        for user in users:
            if user.id == "user1":
                user.reports_to = "user4"

        class CyclicStore:
            def __init__(self, users):
                self.users = users

            def user_records(self):
                return self.users

            def find_user_record(self, user_id):
                return next((u for u in self.users if u.id == user_id), None)

        hierarchy = HierarchyManager(CyclicStore(users))

        assert hierarchy.has_cycle("user4")
        assert [u.id for u in hierarchy.get_supervisory_chain("user4")] == ["user2", "user1"]
        assert {u.id for u in hierarchy.get_all_subordinates("user1")} == {"user2", "user3", "user4", "user5"}

    def test_walks_read_live_records_without_copying(self, seeded_store):
        """Cycle checks run inside every store mutation and must not copy the user list"""

        class LiveOnlyStore:
            def user_records(self):
                return seeded_store.user_records()

            def find_user_record(self, user_id):
                return seeded_store.find_user_record(user_id)

            @property
            def users(self):
                raise AssertionError("copied every user")

            def get_user_by_id(self, user_id):
                raise AssertionError("copied a user")

        hierarchy = HierarchyManager(LiveOnlyStore())

        assert hierarchy.would_create_cycle("user1", "user4")
        assert hierarchy.get_user_level("user4") == 2
        assert hierarchy.get_team_hierarchy("user1")["user_id"] == "user1"

    def test_returned_users_are_copies(self, seeded_store, hierarchy):
        chain = hierarchy.get_supervisory_chain("user4")
        chain[0].name = "Changed"

        assert seeded_store.get_user_by_id("user2").name == "Maria Santos"
