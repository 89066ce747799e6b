"""
Demo-mode server tests, exercised through the HTTP client and resource services
"""
import asyncio
import pytest

from app.exceptions import ApiResponseError
from app.schemas.drafts import ProfileType, UserDraft
from app.schemas.team import TeamCreate
from app.services.competency_service import CompetencyService
from app.services.data_cache import DataCache
from app.services.department_service import DepartmentService
from app.services.pdi_service import PdiService
from app.services.registration_wizard import ApiGateway, RegistrationWizard
from app.services.team_service import TeamService
from app.services.user_service import UserService


class TestServerRoutes:

    def test_root_and_health(self, client):
        assert client.get("/").status_code == 200

        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["users"] == 5

    def test_envelope(self, client):
        body = client.get("/api/departments").json()

        assert body["success"] is True
        assert [d["name"] for d in body["data"]] == ["Engenharia", "Design", "Gente & Gestão", "Comercial"]

    def test_unknown_user_is_404(self, client):
        response = client.get("/api/users/ghost")
        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"

    def test_hierarchy_tree(self, client):
        tree = client.get("/api/hierarchy/tree/user1").json()["data"]

        assert tree["user_id"] == "user1"
        assert {node["user_id"] for node in tree["subordinates"]} == {"user2", "user3", "user5"}
        maria = next(node for node in tree["subordinates"] if node["user_id"] == "user2")
        assert [node["user_id"] for node in maria["subordinates"]] == ["user4"]

    def test_supervisory_chain(self, client):
        chain = client.get("/api/hierarchy/chain/user4").json()["data"]
        assert [user["id"] for user in chain] == ["user2", "user1"]

    def test_link_hierarchy_cycle_is_conflict(self, client):
        response = client.put("/api/hierarchy/user1", json={"superior_id": "user4"})
        assert response.status_code == 409


class TestUserService:

    def test_get_users_and_filters(self, api):
        users = UserService(api)

        assert len(users.get_users()) == 5
        assert {u.id for u in users.get_users(is_leader=True)} == {"user1", "user2", "user3", "user5"}
        assert [u.id for u in users.get_users(is_director=True)] == ["user1"]
        assert [u.id for u in users.get_users(reports_to="user2")] == ["user4"]

    def test_get_user_by_id(self, api):
        users = UserService(api)

        carlos = users.get_user_by_id("user4")
        assert carlos.name == "Carlos Mendes"
        assert carlos.team_ids == ["team1"]
        assert carlos.department_ids == ["dept1"]
        assert users.get_user_by_id("ghost") is None

    def test_subordinates(self, api):
        subordinates = UserService(api).get_subordinates("user1")
        assert {u.id for u in subordinates} == {"user2", "user3", "user5"}

    def test_create_update_delete(self, api):
        users = UserService(api)
        created = users.create_user({
            "name": "Paula Nunes",
            "email": "paula.nunes@empresa.com",
            "position": "Analista Comercial",
            "team_ids": ["team2"],
        })
        assert created.team_ids == ["team2"]
        assert created.id in TeamService(api).get_by_id("team2").member_ids

        updated = users.update_user(created.id, {"position": "Analista Comercial Sênior"})
        assert updated.position == "Analista Comercial Sênior"

        users.delete_user(created.id)
        assert users.get_user_by_id(created.id) is None

    def test_deleting_a_leader_is_conflict(self, api):
        with pytest.raises(ApiResponseError) as exc_info:
            UserService(api).delete_user("user2")

        assert exc_info.value.status == 409
        assert "Transfer the leadership first" in exc_info.value.message

    def test_create_with_auth_requires_password(self, api):
        with pytest.raises(ApiResponseError) as exc_info:
            UserService(api).create_user_with_auth({"name": "Sem Senha", "email": "sem.senha@empresa.com"})
        assert exc_info.value.status == 400

    def test_check_email_and_add_to_teams(self, api):
        users = UserService(api)
        assert users.check_email_exists("joao.silva@empresa.com")
        assert not users.check_email_exists("ninguem@empresa.com")

        users.add_user_to_teams("user4", ["team2"])
        assert UserService(api).get_user_by_id("user4").team_ids == ["team1", "team2"]


class TestTeamService:

    def test_members(self, api):
        teams = TeamService(api)

        assert {u.id for u in teams.get_members("team1")} == {"user2", "user4"}
        assert [t.id for t in teams.get_user_teams("user4")] == ["team1"]
        assert len(teams.get_all_members()) == 4

    def test_create_and_manage_members(self, api):
        teams = TeamService(api)
        team = teams.create(TeamCreate(name="Plataforma", department_id="dept1", leader_id="user3", member_ids=[]))
        assert team.member_ids == ["user3"]

        teams.add_member(team.id, "user4")
        assert teams.get_by_id(team.id).member_ids == ["user3", "user4"]

        teams.replace_members(team.id, ["user5"])
        assert teams.get_by_id(team.id).member_ids == ["user3", "user5"]

        teams.remove_member(team.id, "user5")
        assert teams.get_by_id(team.id).member_ids == ["user3"]

        with pytest.raises(ApiResponseError) as exc_info:
            teams.remove_member(team.id, "user3")
        assert exc_info.value.status == 409

        teams.delete(team.id)
        assert teams.get_by_id(team.id) is None

    def test_unknown_department_is_404(self, api):
        with pytest.raises(ApiResponseError) as exc_info:
            TeamService(api).create({"name": "Fantasma", "department_id": "dept9", "leader_id": "user1"})
        assert exc_info.value.status == 404


class TestDepartmentCompetencyPdi:

    def test_department_in_use_cannot_be_deleted(self, api):
        departments = DepartmentService(api)

        with pytest.raises(ApiResponseError) as exc_info:
            departments.delete("dept1")
        assert exc_info.value.status == 409

        departments.delete("dept4")
        assert departments.get_by_id("dept4") is None

    def test_department_crud(self, api):
        departments = DepartmentService(api)
        created = departments.create({"name": "Financeiro"})
        updated = departments.update(created.id, {"description": "Contas e orçamento"})

        assert updated.description == "Contas e orçamento"
        assert len(departments.get_all()) == 5

    def test_competencies(self, api):
        competencies = CompetencyService(api)
        assert len(competencies.get_all()) == 3

        created = competencies.create({"name": "Inovação"})
        competencies.update(created.id, {"description": "Propõe melhorias"})
        competencies.delete(created.id)
        assert len(competencies.get_all()) == 3

    def test_pdi(self, api):
        pdis = PdiService(api)
        assert pdis.get_pdi("user4") is None

        saved = pdis.save_pdi({
            "employee_id": "user4",
            "items": [{"competency": "Comunicação", "term": "short", "status": 2}],
        })
        assert saved.employee_id == "user4"
        assert pdis.get_pdi("user4").items[0].competency == "Comunicação"


class TestApiIntegrations:

    def test_data_cache_from_api(self, api):
        cache = DataCache.from_api(api)
        snapshot = asyncio.run(cache.get_all())

        assert len(snapshot.users) == 5
        assert len(snapshot.teams) == 3
        assert len(snapshot.departments) == 4
        assert len(snapshot.team_members) == 4

    def test_wizard_through_api_gateway(self, api, seeded_store):
        cache = DataCache.from_api(api)
        asyncio.run(cache.load_all())

        draft = UserDraft(
            profile_type=ProfileType.LEADER,
            name="Rafael Souza",
            email="rafael.souza@empresa.com",
            password="secret123",
            position="Coordenador Comercial",
            team_ids=["team3"],
            reports_to="user1",
        )
        wizard = RegistrationWizard(draft, ApiGateway(api, cache=cache))
        while wizard.step != "review":
            assert wizard.next_step(), wizard.errors

        result = wizard.submit()

        assert result.success
        assert result.warnings == []
        assert seeded_store.get_user_by_id(result.entity.id).reports_to == "user1"
        assert result.entity.is_leader
        assert not cache.is_valid()
