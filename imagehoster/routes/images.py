"""Image feed, upload, detail, edit and delete pages. All require a logged-in user."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from imagehoster.core.dependencies import get_db, get_image_service, require_logged_user
from imagehoster.core.exceptions import BadRequestError, ForbiddenError
from imagehoster.core.templating import image_url, templates
from imagehoster.services.image_service import ImageService
from imagehoster.services.schemas import LoggedUser

router = APIRouter(
    prefix="/images",
    tags=["images"],
    default_response_class=HTMLResponse,
)

TitleField = Annotated[str, Form(min_length=1, max_length=255)]
DescriptionField = Annotated[str | None, Form()]
TagsField = Annotated[str, Form(description="Comma separated tag names")]


async def _read_upload(file: UploadFile | None) -> tuple[str | None, bytes]:
    if file is None or not file.filename:
        return None, b""
    return file.filename, await file.read()


async def _render_image_page(
    request: Request,
    image_service: ImageService,
    image_id: int,
    loggeduser: LoggedUser,
    **context: Any,
) -> Response:
    image = await image_service.get_image(image_id)
    return templates.TemplateResponse(
        request,
        "images/image.html",
        {
            "image": image,
            "tags": image.tags,
            "comments": image.comments,
            "loggeduser": loggeduser,
            **context,
        },
    )


@router.get("")
async def get_user_images(
    request: Request,
    loggeduser: LoggedUser = Depends(require_logged_user),
    image_service: ImageService = Depends(get_image_service),
) -> Response:
    """The logged-in home page listing every image."""
    images = await image_service.get_all_images()
    return templates.TemplateResponse(
        request, "images/images.html", {"images": images, "loggeduser": loggeduser}
    )


@router.get("/upload")
async def new_image(
    request: Request, loggeduser: LoggedUser = Depends(require_logged_user)
) -> Response:
    return templates.TemplateResponse(request, "images/upload.html", {"loggeduser": loggeduser})


@router.post("/upload")
async def create_image(
    request: Request,
    title: TitleField,
    description: DescriptionField = None,
    tags: TagsField = "",
    file: Annotated[UploadFile | None, File()] = None,
    loggeduser: LoggedUser = Depends(require_logged_user),
    db: AsyncSession = Depends(get_db),
    image_service: ImageService = Depends(get_image_service),
) -> Response:
    """Store the uploaded file as base64 with its tags, then go back to the feed."""
    filename, content = await _read_upload(file)
    try:
        await image_service.upload_image(
            owner_id=loggeduser.id,
            title=title,
            description=description,
            tags=tags,
            filename=filename,
            content=content,
        )
    except BadRequestError as exc:
        return templates.TemplateResponse(
            request,
            "images/upload.html",
            {
                "loggeduser": loggeduser,
                "uploadError": exc.message,
                "title": title,
                "description": description,
                "tags": tags,
            },
            status_code=exc.status_code,
        )

    await db.commit()
    return RedirectResponse("/images", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{image_id}/edit")
async def edit_image(
    request: Request,
    image_id: int,
    loggeduser: LoggedUser = Depends(require_logged_user),
    image_service: ImageService = Depends(get_image_service),
) -> Response:
    """Edit form for the owner; anybody else sees the image page with an error."""
    try:
        image = await image_service.get_image_for_edit(image_id, loggeduser.id)
    except ForbiddenError as exc:
        return await _render_image_page(
            request, image_service, image_id, loggeduser, editError=exc.message
        )

    return templates.TemplateResponse(
        request,
        "images/edit.html",
        {
            "image": image,
            "tags": ",".join(tag.name for tag in image.tags),
            "loggeduser": loggeduser,
        },
    )


@router.post("/{image_id}/edit")
async def update_image(
    request: Request,
    image_id: int,
    title: TitleField,
    description: DescriptionField = None,
    tags: TagsField = "",
    file: Annotated[UploadFile | None, File()] = None,
    loggeduser: LoggedUser = Depends(require_logged_user),
    db: AsyncSession = Depends(get_db),
    image_service: ImageService = Depends(get_image_service),
) -> Response:
    """Apply the owner's edits; an empty file field keeps the current image."""
    filename, content = await _read_upload(file)
    try:
        image = await image_service.update_image(
            image_id,
            loggeduser.id,
            title=title,
            description=description,
            tags=tags,
            filename=filename,
            content=content,
        )
    except ForbiddenError as exc:
        return await _render_image_page(
            request, image_service, image_id, loggeduser, editError=exc.message
        )
    except BadRequestError as exc:
        image = await image_service.get_image_for_edit(image_id, loggeduser.id)
        return templates.TemplateResponse(
            request,
            "images/edit.html",
            {
                "image": image,
                "tags": tags,
                "loggeduser": loggeduser,
                "uploadError": exc.message,
            },
            status_code=exc.status_code,
        )

    await db.commit()
    return RedirectResponse(image_url(image), status_code=status.HTTP_303_SEE_OTHER)


@router.post("/{image_id}/delete")
async def delete_image(
    request: Request,
    image_id: int,
    loggeduser: LoggedUser = Depends(require_logged_user),
    db: AsyncSession = Depends(get_db),
    image_service: ImageService = Depends(get_image_service),
) -> Response:
    """Delete the owner's image with its comments; anybody else sees the image page with an error."""
    try:
        await image_service.delete_image(image_id, loggeduser.id)
    except ForbiddenError as exc:
        return await _render_image_page(
            request, image_service, image_id, loggeduser, deleteError=exc.message
        )

    await db.commit()
    return RedirectResponse("/images", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{image_id}/{title:path}")
async def show_image(
    request: Request,
    image_id: int,
    title: str,
    loggeduser: LoggedUser = Depends(require_logged_user),
    image_service: ImageService = Depends(get_image_service),
) -> Response:
    """Image page with tags and comments. The title segment is informational and may contain slashes."""
    return await _render_image_page(request, image_service, image_id, loggeduser)
