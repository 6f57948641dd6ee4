import logging

from sqlmodel import Session, SQLModel, create_engine, select

from siteguard import crud
from siteguard.core.config import settings
from siteguard.models import User, UserCreate

logger = logging.getLogger(__name__)

connect_args = (
    {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
)
engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)


def init_db(session: Session) -> None:
    # Tables are created directly from the SQLModel metadata; there is no
    # migration history to replay.
    SQLModel.metadata.create_all(session.get_bind())

    if not settings.FIRST_SUPERUSER or not settings.FIRST_SUPERUSER_PASSWORD:
        return

    user = session.exec(
        select(User).where(User.email == settings.FIRST_SUPERUSER)
    ).first()
    if not user:
        logger.info("Creating first superuser %s", settings.FIRST_SUPERUSER)
        user_in = UserCreate(
            email=settings.FIRST_SUPERUSER,
            password=settings.FIRST_SUPERUSER_PASSWORD,
            name="Administrator",
            is_superuser=True,
        )
        crud.create_user(session=session, user_create=user_in)
