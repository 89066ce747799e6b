"""
Demo Departments, Teams and Competencies for the performance-management demo mode
Teams reference their department, leader and members by id
"""

DEMO_DEPARTMENTS = [
    {"id": "dept1", "name": "Engenharia", "description": "Desenvolvimento de produtos e infraestrutura"},
    {"id": "dept2", "name": "Design", "description": "Pesquisa e design de experiência"},
    {"id": "dept3", "name": "Gente & Gestão", "description": "Pessoas, cultura e desenvolvimento"},
    {"id": "dept4", "name": "Comercial", "description": "Vendas e relacionamento com clientes"},
]

# Demo Teams Data
# Structure: Team Name, Description, Department, Leader ID, Member IDs
DEMO_TEAMS = [
    # ENGENHARIA
    {
        "id": "team1",
        "name": "Backend",
        "description": "APIs, serviços e banco de dados",
        "department_id": "dept1",
        "leader_id": "user2",  # Maria Santos
        "member_ids": ["user2", "user4"]  # Maria Santos, Carlos Mendes
    },
    {
        "id": "team2",
        "name": "Frontend",
        "description": "Aplicações web e interface do usuário",
        "department_id": "dept1",
        "leader_id": "user3",  # Ana Costa
        "member_ids": ["user3"]
    },

    # DESIGN
    {
        "id": "team3",
        "name": "UX Research",
        "description": "Pesquisa com usuários e testes de usabilidade",
        "department_id": "dept2",
        "leader_id": "user5",  # Beatriz Lima
        "member_ids": ["user5"]
    },
]

DEMO_COMPETENCIES = [
    {"id": "comp1", "name": "Comunicação", "description": "Clareza e empatia na troca de informações"},
    {"id": "comp2", "name": "Trabalho em equipe", "description": "Colaboração e apoio aos colegas"},
    {"id": "comp3", "name": "Orientação a resultados", "description": "Foco em entregas com qualidade e prazo"},
]
