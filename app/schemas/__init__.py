from .user import UserCreate, UserUpdate, UserTeamsAdd, EmailCheck
from .team import TeamCreate, TeamUpdate, TeamMemberAdd, TeamMembersReplace
from .department import DepartmentCreate, DepartmentUpdate
from .competency import CompetencyCreate, CompetencyUpdate
from .pdi import PdiCreate
from .evaluation import CriterionScore, Evaluation, ConsensusMeeting, Feedback
from .hierarchy import HierarchyUser, HierarchyNode, HierarchyLink
from .drafts import ProfileType, UserDraft, TeamDraft, DepartmentDraft, Draft
from .common import success
