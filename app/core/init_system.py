import logging

from app.core.config import settings
from app.database import session_scope
from app.models.user import User, UserRole
from app.services import user_service

logger = logging.getLogger(__name__)


def init_system_data():
    """
    Seed a first admin account when the user table is empty, so a fresh
    deployment can be signed into. Does nothing once any user exists.
    """
    with session_scope() as db:
        user_count = db.query(User).count()
        if user_count:
            logger.info(f"System initialization check: {user_count} user(s) found.")
            return

        logger.info("Running startup initialization...")
        admin = user_service.create_user(
            db,
            email=settings.bootstrap_admin_email,
            password=settings.bootstrap_admin_password,
            role=UserRole.ADMIN,
            first_name="System",
            last_name="Administrator",
        )
        logger.warning(f"Created default admin {admin.email}; change its password immediately")
