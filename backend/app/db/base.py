from backend.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from backend.app.models.user import User  # noqa: F401
from backend.app.models.customer import Customer  # noqa: F401
from backend.app.models.renewal import Renewal  # noqa: F401
from backend.app.models.attachment import Attachment  # noqa: F401
from backend.app.models.notification import Notification  # noqa: F401
from backend.app.models.notification_preference import NotificationPreference  # noqa: F401
