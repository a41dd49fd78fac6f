"""Posting comments on an image."""
from typing import Annotated

from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from imagehoster.core.dependencies import get_comment_service, get_db, require_logged_user
from imagehoster.core.templating import title_slug
from imagehoster.services.comment_service import CommentService
from imagehoster.services.schemas import LoggedUser

router = APIRouter(prefix="/images", tags=["comments"])


@router.post("/{image_id}/{title:path}/comments")
async def create_comment(
    image_id: int,
    title: str,
    text: Annotated[str, Form(min_length=1, max_length=2000)],
    loggeduser: LoggedUser = Depends(require_logged_user),
    db: AsyncSession = Depends(get_db),
    comment_service: CommentService = Depends(get_comment_service),
) -> RedirectResponse:
    """Add the logged-in user's comment and return to the image page."""
    await comment_service.create_comment(image_id, loggeduser.id, text)
    await db.commit()
    return RedirectResponse(
        f"/images/{image_id}/{title_slug(title)}", status_code=status.HTTP_303_SEE_OTHER
    )
