import logging

from eventnest.auth import get_password_hash
from eventnest.config import load_settings
from eventnest.models.user import Role, User

logger = logging.getLogger(__name__)


def create_first_user(session_factory, settings):
    """Creates the first ADMIN account from ADMIN_EMAIL / ADMIN_PASSWORD, if absent."""
    if not (settings.admin_email and settings.admin_password):
        return

    db = session_factory()
    try:
        user = db.query(User).filter(User.email == settings.admin_email).first()

        if not user:
            logger.info("Creating first administrator %s", settings.admin_email)
            db_user = User(
                name=settings.admin_name,
                email=settings.admin_email,
                password_hash=get_password_hash(settings.admin_password),
                role=Role.ADMIN,
            )
            db.add(db_user)
            db.commit()
        else:
            logger.info("Administrator %s already exists", settings.admin_email)

    except Exception:
        logger.exception("Could not create the first administrator")
        db.rollback()
    finally:
        db.close()


if __name__ == "__main__":
    from eventnest.database import Database
    from eventnest.logging_config import setup_logging

    settings = load_settings()
    setup_logging(settings)
    database = Database(settings.database_url)
    database.create_all()
    create_first_user(database.SessionLocal, settings)
