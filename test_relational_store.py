"""
Relational store tests: fan-out, guarded mutations and persistence
"""
import pytest

from app.exceptions import EntityNotFoundError, InvariantError
from app.schemas.team import TeamCreate, TeamUpdate
from app.schemas.user import UserCreate, UserUpdate
from app.services.local_storage import MemoryStorage
from app.services.notification_service import ToastType
from app.store import RelationalStore
from seed_all import build_seed


@pytest.fixture
def org(store):
    """Engenharia / Backend with leader U1 and regular member U2 reporting to U1"""
    engenharia = store.add_department({"name": "Engenharia"})
    u1 = store.add_user(UserCreate(name="Leader One", email="leader.one@example.com", position="Tech Lead", is_leader=True))
    backend = store.add_team(TeamCreate(name="Backend", department_id=engenharia.id, leader_id=u1.id, member_ids=[u1.id]))
    u2 = store.add_user(UserCreate(
        name="Regular Two",
        email="regular.two@example.com",
        position="Developer",
        team_ids=[backend.id],
        reports_to=u1.id
    ))
    return {"store": store, "department": engenharia, "backend": backend, "u1": u1, "u2": u2}


class TestEndToEndScenario:

    def test_department_team_and_members(self, org):
        """A regular member inherits the team's department and is appended after the leader"""
        store = org["store"]
        u2 = store.get_user_by_id(org["u2"].id)
        team = store.get_team_by_id(org["backend"].id)

        assert u2.department_ids == [org["department"].id]
        assert team.member_ids == [org["u1"].id, org["u2"].id]
        assert u2.reports_to == org["u1"].id
        assert store.check_invariants() == []

    def test_department_in_use_cannot_be_deleted(self, org):
        with pytest.raises(InvariantError):
            org["store"].delete_department(org["department"].id)

    def test_leader_flags(self, org):
        u1 = org["store"].get_user_by_id(org["u1"].id)
        assert u1.is_leader
        assert u1.leader_of_team_ids == [org["backend"].id]
        assert u1.team_ids == [org["backend"].id]


class TestBidirectionalInvariant:

    def test_invariants_hold_after_every_mutation(self, store):
        """Every add/delete of users and teams keeps members and team lists mirrored"""
        dept = store.add_department({"name": "Design"})
        leaders = [
            store.add_user({"name": f"Leader {i}", "email": f"leader{i}@example.com", "is_leader": True})
            for i in range(3)
        ]
        assert store.check_invariants() == []

        teams = []
        for i, leader in enumerate(leaders):
            teams.append(store.add_team({
                "name": f"Team {i}",
                "department_id": dept.id,
                "leader_id": leader.id,
                "member_ids": [],
            }))
            assert store.check_invariants() == []

        members = []
        for i in range(4):
            members.append(store.add_user({
                "name": f"Member {i}",
                "email": f"member{i}@example.com",
                "team_ids": [teams[i % 3].id, teams[(i + 1) % 3].id],
            }))
            assert store.check_invariants() == []

        store.delete_user(members[0].id)
        assert store.check_invariants() == []

        store.delete_team(teams[1].id)
        assert store.check_invariants() == []
        assert all(teams[1].id not in user.team_ids for user in store.users)
        assert teams[1].id not in store.get_user_by_id(leaders[1].id).leader_of_team_ids

        # Without its team the former leader can now be deleted
        store.delete_user(leaders[1].id)
        assert store.check_invariants() == []

        for team in store.teams:
            assert team.leader_id in team.member_ids
            for user in store.users:
                assert (team.id in user.team_ids) == (user.id in team.member_ids)

    def test_leader_is_added_to_members(self, store):
        dept = store.add_department({"name": "Comercial"})
        leader = store.add_user({"name": "Lead", "email": "lead@example.com"})
        member = store.add_user({"name": "Member", "email": "member@example.com"})

        team = store.add_team(TeamCreate(name="Vendas", department_id=dept.id, leader_id=leader.id, member_ids=[member.id]))

        assert team.member_ids == [member.id, leader.id]
        assert store.get_user_by_id(leader.id).is_leader
        assert store.get_user_by_id(member.id).department_ids == [dept.id]

    def test_add_user_as_leader_of_existing_team(self, org):
        """Taking over a team moves it out of the previous leader's led teams"""
        store = org["store"]
        new_leader = store.add_user({
            "name": "New Lead",
            "email": "new.lead@example.com",
            "leader_of_team_ids": [org["backend"].id],
        })

        team = store.get_team_by_id(org["backend"].id)
        assert team.leader_id == new_leader.id
        assert new_leader.id in team.member_ids
        assert store.get_user_by_id(new_leader.id).is_leader
        assert store.get_user_by_id(org["u1"].id).leader_of_team_ids == []
        assert store.check_invariants() == []


class TestGuardedMutations:

    def test_deleting_a_team_leader_is_rejected(self, org, notifier):
        """The store is left exactly as it was and an error toast is emitted"""
        store = org["store"]
        before = store.snapshot()
        persisted = store.storage.get_item("users")

        with pytest.raises(InvariantError) as exc_info:
            store.delete_user(org["u1"].id)

        assert "Transfer the leadership first" in exc_info.value.message
        assert store.snapshot() == before
        assert store.storage.get_item("users") == persisted
        assert notifier.history[-1].type == ToastType.ERROR

    def test_deleting_a_user_with_direct_reports_is_rejected(self, org):
        """U1 leads no team after the transfer but U2 still reports to it"""
        store = org["store"]
        store.update_team(org["backend"].id, {"leader_id": org["u2"].id})
        before = store.snapshot()

        with pytest.raises(InvariantError) as exc_info:
            store.delete_user(org["u1"].id)

        assert "Reassign them first" in exc_info.value.message
        assert store.snapshot() == before
        assert store.get_user_by_id(org["u2"].id).reports_to == org["u1"].id

    def test_deleting_the_director_team_is_rejected_while_directors_exist(self, org):
        store = org["store"]
        store.add_user({"name": "Director", "email": "director@example.com", "is_director": True})
        diretoria = next(team for team in store.teams if team.name == "Diretoria")
        before = store.snapshot()

        with pytest.raises(InvariantError):
            store.delete_team(diretoria.id)

        assert store.snapshot() == before

    def test_deleting_a_referenced_department_is_rejected(self, org):
        store = org["store"]
        before = store.snapshot()

        with pytest.raises(InvariantError):
            store.delete_department(org["department"].id)

        assert store.snapshot() == before

    def test_unknown_team_leaves_store_untouched(self, org):
        store = org["store"]
        before = store.snapshot()

        with pytest.raises(EntityNotFoundError):
            store.add_user({"name": "Ghost", "email": "ghost@example.com", "team_ids": ["team-missing"]})

        assert store.snapshot() == before

    def test_duplicate_email_is_rejected(self, org):
        with pytest.raises(InvariantError):
            org["store"].add_user({"name": "Copy", "email": "LEADER.ONE@example.com"})

    def test_unused_department_can_be_deleted(self, store, notifier):
        dept = store.add_department({"name": "Gente & Gestão"})
        store.delete_department(dept.id)

        assert store.departments == []
        assert notifier.history[-1].type == ToastType.SUCCESS


class TestUsers:

    def test_delete_user_detaches_memberships_and_pdis(self, org):
        store = org["store"]
        store.save_pdi({"employee_id": org["u2"].id, "items": [{"competency": "Comunicação"}]})

        store.delete_user(org["u2"].id)

        assert store.get_user_by_id(org["u2"].id) is None
        assert org["u2"].id not in store.get_team_by_id(org["backend"].id).member_ids
        assert store.get_pdi(org["u2"].id) is None
        assert store.check_invariants() == []

    def test_update_user_resyncs_team_memberships(self, org):
        store = org["store"]
        frontend = store.add_team({
            "name": "Frontend",
            "department_id": org["department"].id,
            "leader_id": org["u1"].id,
        })

        updated = store.update_user(org["u2"].id, UserUpdate(team_ids=[frontend.id]))

        assert updated.team_ids == [frontend.id]
        assert org["u2"].id not in store.get_team_by_id(org["backend"].id).member_ids
        assert org["u2"].id in store.get_team_by_id(frontend.id).member_ids
        assert store.check_invariants() == []

    def test_leader_cannot_leave_a_team_it_leads(self, org):
        with pytest.raises(InvariantError):
            org["store"].update_user(org["u1"].id, {"team_ids": []})

    def test_update_user_rejects_reporting_cycle(self, org):
        with pytest.raises(InvariantError):
            org["store"].update_user(org["u1"].id, {"reports_to": org["u2"].id})

    def test_link_hierarchy_rejects_self_report(self, org):
        with pytest.raises(InvariantError):
            org["store"].link_hierarchy(org["u1"].id, org["u1"].id)

    def test_link_hierarchy_sets_superior(self, org):
        store = org["store"]
        director = store.add_user({"name": "Director", "email": "director@example.com", "is_director": True})

        user = store.link_hierarchy(org["u1"].id, director.id)

        assert user.reports_to == director.id
        assert [u.id for u in store.get_direct_reports(director.id)] == [org["u1"].id]

    def test_directors_are_leaders(self, store):
        director = store.add_user({"name": "Director", "email": "director@example.com", "is_director": True})
        assert director.is_leader

        regular = store.add_user({"name": "Regular", "email": "regular@example.com"})
        promoted = store.update_user(regular.id, {"is_director": True})
        assert promoted.is_leader

    def test_directors_join_the_director_team(self, org):
        """The first director creates and leads Diretoria; later ones join it"""
        store = org["store"]
        first = store.add_user({
            "name": "First Director",
            "email": "first.director@example.com",
            "is_director": True,
            "team_ids": [org["backend"].id],
        })
        second = store.add_user({"name": "Second Director", "email": "second.director@example.com", "is_director": True})

        diretoria = next(team for team in store.teams if team.name == "Diretoria")
        assert diretoria.department_id == org["department"].id
        assert diretoria.leader_id == first.id
        assert diretoria.member_ids == [first.id, second.id]
        assert store.get_user_by_id(first.id).team_ids == [diretoria.id]
        assert store.get_user_by_id(second.id).leader_of_team_ids == []
        assert store.check_invariants() == []

    def test_director_team_prefers_people_department(self, seeded_store):
        director = seeded_store.add_user({"name": "Diretora", "email": "diretora@empresa.com", "is_director": True})

        team = seeded_store.get_teams_by_user(director.id)[0]
        assert team.name == "Diretoria"
        assert team.department_id == "dept3"
        assert seeded_store.get_user_by_id(director.id).department_ids == ["dept3"]

    def test_list_users_filters(self, org):
        store = org["store"]
        assert [u.id for u in store.list_users(is_leader=True)] == [org["u1"].id]
        assert [u.id for u in store.list_users(reports_to=org["u1"].id)] == [org["u2"].id]
        assert len(store.list_users(active=True)) == 2
        assert store.list_users(is_director=True) == []

    def test_reads_return_copies(self, org):
        store = org["store"]
        user = store.get_user_by_id(org["u2"].id)
        user.team_ids.clear()

        assert store.get_user_by_id(org["u2"].id).team_ids == [org["backend"].id]


class TestTeams:

    def test_update_team_transfers_leadership(self, org):
        store = org["store"]
        team = store.update_team(org["backend"].id, TeamUpdate(leader_id=org["u2"].id))

        assert team.leader_id == org["u2"].id
        assert store.get_user_by_id(org["u1"].id).leader_of_team_ids == []
        assert store.get_user_by_id(org["u2"].id).leader_of_team_ids == [org["backend"].id]
        assert store.check_invariants() == []

        # Once nobody leads through or reports to the former leader it can be removed
        store.update_user(org["u2"].id, {"reports_to": None})
        store.delete_user(org["u1"].id)
        assert store.check_invariants() == []

    def test_update_team_members_keeps_leader(self, org):
        store = org["store"]
        team = store.update_team(org["backend"].id, {"member_ids": []})

        assert team.member_ids == [org["u1"].id]
        assert store.get_user_by_id(org["u2"].id).team_ids == []
        assert store.get_user_by_id(org["u2"].id).department_ids == []

    def test_remove_team_member_rejects_leader(self, org):
        with pytest.raises(InvariantError):
            org["store"].remove_team_member(org["backend"].id, org["u1"].id)

    def test_duplicate_team_name_is_rejected(self, org):
        with pytest.raises(InvariantError):
            org["store"].add_team({
                "name": "backend",
                "department_id": org["department"].id,
                "leader_id": org["u1"].id,
            })

    def test_team_memberships(self, org):
        pairs = [(m.team_id, m.user.id) for m in org["store"].team_memberships()]
        assert pairs == [(org["backend"].id, org["u1"].id), (org["backend"].id, org["u2"].id)]

    def test_responsible_alias(self, org):
        team = org["store"].add_team({
            "name": "Mobile",
            "department_id": org["department"].id,
            "responsible_id": org["u2"].id,
        })
        assert team.leader_id == org["u2"].id


class TestCompetenciesAndPdis:

    def test_competency_crud(self, store):
        competency = store.add_competency({"name": "Comunicação"})
        store.update_competency(competency.id, {"description": "Clareza"})

        assert store.get_competency(competency.id).description == "Clareza"

        store.delete_competency(competency.id)
        assert store.list_competencies() == []

    def test_save_pdi_replaces_previous_plan(self, org):
        store = org["store"]
        first = store.save_pdi({"employee_id": org["u2"].id, "items": [{"competency": "Comunicação", "term": "short"}]})
        second = store.save_pdi({"employee_id": org["u2"].id, "items": [{"competency": "Liderança"}]})

        assert second.id == first.id
        assert [item.competency for item in store.get_pdi(org["u2"].id).items] == ["Liderança"]

    def test_save_pdi_requires_employee(self, store):
        with pytest.raises(EntityNotFoundError):
            store.save_pdi({"employee_id": "user-missing"})


class TestPersistence:

    def test_mutations_are_persisted_and_reloaded(self, org, storage):
        reloaded = RelationalStore.load(storage)

        assert reloaded.snapshot() == org["store"].snapshot()
        assert reloaded.check_invariants() == []

    def test_persistence_failure_does_not_fail_mutation(self, notifier):
        class BrokenStorage(MemoryStorage):
            def set_item(self, key, value):
                raise OSError("disk full")

        store = RelationalStore(storage=BrokenStorage(), notifier=notifier)
        department = store.add_department({"name": "Engenharia"})

        assert store.get_department_by_id(department.id) is not None

    def test_load_seeds_empty_storage(self):
        storage = MemoryStorage()
        store = RelationalStore.load(storage, seed=build_seed())

        assert len(store.users) == 5
        assert len(store.teams) == 3
        assert len(store.departments) == 4
        assert store.check_invariants() == []
        assert storage.get_item("teams") is not None

    def test_load_rebuilds_user_side_from_teams(self):
        seed = build_seed()
        store = RelationalStore.load(MemoryStorage(), seed=seed)

        carlos = store.get_user_by_id("user4")
        maria = store.get_user_by_id("user2")
        assert carlos.team_ids == ["team1"]
        assert carlos.department_ids == ["dept1"]
        assert maria.leader_of_team_ids == ["team1"]
