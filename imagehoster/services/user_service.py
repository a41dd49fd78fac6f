"""User registration and credential checks."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from imagehoster.core.exceptions import ConflictError
from imagehoster.core.security import hash_password, verify_password
from imagehoster.models.user import User, UserProfile
from imagehoster.repository.user_repository import UserRepository
from imagehoster.services.schemas import RegistrationForm

logger = structlog.get_logger(__name__)

USERNAME_TAKEN_ERROR = "Username already exists"


class UserService:
    """Registration and login on top of UserRepository.

    Callers own the transaction: nothing here commits.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.users = UserRepository(session)

    @staticmethod
    def new_user() -> User:
        """A blank, unsaved user with a blank profile for the registration form."""
        return User(profile=UserProfile())

    @staticmethod
    def user_from_form(form: RegistrationForm) -> User:
        """Unsaved user carrying the submitted values, used to re-render the form."""
        return User(
            username=form.username,
            password=form.password,
            profile=UserProfile(
                full_name=form.full_name,
                email_address=form.email_address,
                mobile_number=form.mobile_number,
            ),
        )

    async def register_user(self, form: RegistrationForm) -> User:
        """Persist a new user and profile.

        Raises:
            ConflictError: If the username is already registered
        """
        if await self.users.username_exists(form.username):
            logger.info("registration_rejected", username=form.username, reason="username_taken")
            raise ConflictError(
                message=USERNAME_TAKEN_ERROR,
                error_code="USERNAME_TAKEN",
                detail={"username": form.username},
            )

        user = await self.users.add(
            User(
                username=form.username,
                password=hash_password(form.password),
                profile=UserProfile(
                    full_name=form.full_name,
                    email_address=form.email_address,
                    mobile_number=form.mobile_number,
                ),
            )
        )
        logger.info("user_registered", user_id=user.id, username=user.username)
        return user

    async def login(self, username: str, password: str) -> User | None:
        """Return the user when the credentials match, otherwise None."""
        user = await self.users.find_by_username(username)
        if user is None or not verify_password(user.password, password):
            logger.info("login_failed", username=username)
            return None

        logger.info("login_succeeded", user_id=user.id)
        return user
