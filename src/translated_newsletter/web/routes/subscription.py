# ABOUTME: Subscriber routes for the newsletter store.
# ABOUTME: Handles add, get, update and unsubscribe by email.

import structlog
from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from translated_newsletter.models import NewsletterUser, NewsletterUserUpdate
from translated_newsletter.web.dependencies import SubscriberSvc, Templates

router = APIRouter(tags=["subscription"])
log = structlog.get_logger()


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


@router.post("/users", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def add_user(user: NewsletterUser, service: SubscriberSvc):
    """Subscribe a new user."""
    try:
        await service.subscribe(user)
    except ValueError as e:
        log.info("subscription_conflict", email=user.email)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return MessageResponse(message="User added successfully.")


@router.get("/users/{email}", response_model=NewsletterUser)
async def get_user(email: str, service: SubscriberSvc):
    """Return a subscriber by email."""
    user = await service.get_subscriber(email)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.put("/users/{email}", response_model=MessageResponse)
async def update_user(email: str, update: NewsletterUserUpdate, service: SubscriberSvc):
    """Update a subscriber's profile, language or country."""
    user = await service.update_subscriber(email, update)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return MessageResponse(message="User updated successfully.")


@router.get("/unsubscribe/{email}", response_class=HTMLResponse)
async def unsubscribe(request: Request, email: str, service: SubscriberSvc, templates: Templates):
    """Remove a subscriber; linked from every newsletter email."""
    removed = await service.unsubscribe(email)
    return templates.TemplateResponse(
        request=request,
        name="unsubscribe.html",
        context={"email": email, "removed": removed},
        status_code=status.HTTP_200_OK if removed else status.HTTP_404_NOT_FOUND,
    )
