"""
Demo Users Data for the performance-management demo mode
Creates a small organisation with a director, team leaders and collaborators
"""

# Demo Users Data
# Team membership and leadership live on the teams (demo_teams.py)
DEMO_USERS = [
    # Director - top of the reports-to hierarchy
    {
        "id": "user1",
        "name": "João Silva",
        "email": "joao.silva@empresa.com",
        "position": "Diretor de Engenharia",
        "is_leader": True,
        "is_director": True,
        "phone": "(11) 98765-4321",
        "birth_date": "1980-03-15",
        "join_date": "2015-02-01",
        "reports_to": None
    },

    # ENGENHARIA
    {
        "id": "user2",
        "name": "Maria Santos",
        "email": "maria.santos@empresa.com",
        "position": "Tech Lead Backend",
        "is_leader": True,
        "phone": "(11) 98765-4322",
        "birth_date": "1988-07-22",
        "join_date": "2018-05-14",
        "reports_to": "user1"  # João Silva - Director
    },
    {
        "id": "user3",
        "name": "Ana Costa",
        "email": "ana.costa@empresa.com",
        "position": "Tech Lead Frontend",
        "is_leader": True,
        "phone": "(11) 98765-4323",
        "birth_date": "1990-11-03",
        "join_date": "2019-08-01",
        "reports_to": "user1"  # João Silva - Director
    },
    {
        "id": "user4",
        "name": "Carlos Mendes",
        "email": "carlos.mendes@empresa.com",
        "position": "Desenvolvedor Backend Pleno",
        "phone": "(21) 99876-5432",
        "birth_date": "1995-01-30",
        "join_date": "2021-03-08",
        "reports_to": "user2"  # Maria Santos - Backend Lead
    },

    # DESIGN
    {
        "id": "user5",
        "name": "Beatriz Lima",
        "email": "beatriz.lima@empresa.com",
        "position": "UX Researcher Sênior",
        "is_leader": True,
        "phone": "(31) 99654-3210",
        "birth_date": "1992-05-18",
        "join_date": "2020-10-19",
        "reports_to": "user1"  # João Silva - Director
    },
]
