"""Registration, login and logout pages."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from imagehoster.core.dependencies import (
    get_db,
    get_http_session,
    get_image_service,
    get_session_store,
    get_user_service,
)
from imagehoster.core.exceptions import ConflictError
from imagehoster.core.sessions import SESSION_USER_KEY, HttpSession, HttpSessionStore
from imagehoster.core.templating import templates
from imagehoster.services.image_service import ImageService
from imagehoster.services.password_policy import PASSWORD_TYPE_ERROR, is_valid_password
from imagehoster.services.schemas import LoggedUser, RegistrationForm
from imagehoster.services.user_service import UserService

router = APIRouter(
    prefix="/users",
    tags=["users"],
    default_response_class=HTMLResponse,
)

logger = structlog.get_logger(__name__)


def registration_form(
    username: Annotated[str, Form(min_length=1, max_length=100)],
    password: Annotated[str, Form()] = "",
    full_name: Annotated[str | None, Form(max_length=255)] = None,
    email_address: Annotated[str | None, Form(max_length=255)] = None,
    mobile_number: Annotated[str | None, Form(max_length=32)] = None,
) -> RegistrationForm:
    """Bind and validate the registration form fields."""
    return RegistrationForm(
        username=username,
        password=password,
        full_name=full_name,
        email_address=email_address,
        mobile_number=mobile_number,
    )


@router.get("/registration")
async def registration(
    request: Request, user_service: UserService = Depends(get_user_service)
) -> Response:
    """Registration page with a blank user and profile."""
    return templates.TemplateResponse(
        request, "users/registration.html", {"user": user_service.new_user()}
    )


@router.post("/registration")
async def register_user(
    request: Request,
    form: RegistrationForm = Depends(registration_form),
    db: AsyncSession = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
) -> Response:
    """Create the account, or re-render the form when the password or username is rejected."""
    if not is_valid_password(form.password):
        return templates.TemplateResponse(
            request,
            "users/registration.html",
            {"user": user_service.user_from_form(form), "passwordTypeError": PASSWORD_TYPE_ERROR},
        )

    try:
        await user_service.register_user(form)
    except ConflictError as exc:
        return templates.TemplateResponse(
            request,
            "users/registration.html",
            {"user": user_service.user_from_form(form), "usernameError": exc.message},
        )

    await db.commit()
    return RedirectResponse("/users/login", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/login")
async def login(request: Request) -> Response:
    """Login page."""
    return templates.TemplateResponse(request, "users/login.html", {})


@router.post("/login")
async def login_user(
    request: Request,
    username: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    db: AsyncSession = Depends(get_db),
    user_service: UserService = Depends(get_user_service),
    store: HttpSessionStore = Depends(get_session_store),
    http_session: HttpSession = Depends(get_http_session),
) -> Response:
    """Store the user in the session and go to the feed; on bad credentials show the form again."""
    user = await user_service.login(username, password)
    if user is None:
        return templates.TemplateResponse(request, "users/login.html", {})

    http_session[SESSION_USER_KEY] = LoggedUser.model_validate(user).model_dump(mode="json")
    await store.rotate(http_session)

    response = RedirectResponse("/images", status_code=status.HTTP_303_SEE_OTHER)
    await store.save(http_session, response)
    await db.commit()
    return response


@router.post("/logout")
async def logout(
    request: Request,
    db: AsyncSession = Depends(get_db),
    store: HttpSessionStore = Depends(get_session_store),
    http_session: HttpSession = Depends(get_http_session),
    image_service: ImageService = Depends(get_image_service),
) -> Response:
    """Destroy the session, then show the landing page with every image."""
    await store.invalidate(http_session)

    images = await image_service.get_all_images()
    response = templates.TemplateResponse(request, "index.html", {"images": images})
    await store.save(http_session, response)
    await db.commit()
    logger.info("user_logged_out")
    return response
