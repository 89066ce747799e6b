from .user import User
from .team import Team, TeamMembership
from .department import Department
from .competency import OrganizationalCompetency
from .pdi import PdiItem, PdiRecord
