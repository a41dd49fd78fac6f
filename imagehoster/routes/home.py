"""Public landing page."""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response

from imagehoster.core.dependencies import get_image_service, get_logged_user
from imagehoster.core.templating import templates
from imagehoster.services.image_service import ImageService
from imagehoster.services.schemas import LoggedUser

router = APIRouter(tags=["home"], default_response_class=HTMLResponse)

ROUTER_CONFIG = {"prefix": ""}


@router.get("/")
async def index(
    request: Request,
    loggeduser: LoggedUser | None = Depends(get_logged_user),
    image_service: ImageService = Depends(get_image_service),
) -> Response:
    """Landing page listing every image, newest first."""
    images = await image_service.get_all_images()
    return templates.TemplateResponse(
        request, "index.html", {"images": images, "loggeduser": loggeduser}
    )
