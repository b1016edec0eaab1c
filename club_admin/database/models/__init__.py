from .user import AuthAccount, User
from .user_role import UserRole
from .news import News
from .event import Event
from .magazine import MagazineIssue, MagazineRead
from .survey import Survey
from .sponsor import Sponsor
from .team_member import TeamMember
from .academic_document import AcademicDocument
from .internship import Internship
from .contact_message import ContactMessage
