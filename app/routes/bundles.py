# app/routes/bundles.py
"""
Admin pages for bundles.

- /app/bundles: created bundles, available products and the create-bundle modal
- /app/created-bundles: created bundles only

Modal state is kept in the page itself. The draft travels in hidden form
fields; every button on the creator page posts it back, including View Details
(action=view with a view=<bundle id> field). GET ?view=<bundle id> opens the
details modal when there is no draft to carry.
"""

import logging
from typing import List, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from app.core.config import Settings, get_settings
from app.core.enums import DraftAction
from app.core.exceptions import BundleCreationError, ValidationError
from app.core.templates import templates
from app.dependencies import get_bundle_service
from app.schemas.bundle import ResolvedBundle
from app.services.bundle_service import BundleService
from app.services.bundles.draft import BundleDraft, apply_draft_action

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/app", tags=["bundles"])


def _find_bundle(bundles: List[ResolvedBundle], bundle_id: Optional[str]) -> Optional[ResolvedBundle]:
    if not bundle_id:
        return None
    return next((bundle for bundle in bundles if bundle.id == bundle_id), None)


def _draft_from_form(
    name: str,
    description: str,
    selected_products: List[str],
    discount: Optional[int],
    settings: Settings,
) -> BundleDraft:
    return BundleDraft(
        name=name,
        description=description,
        selected_products=[pid for pid in selected_products if pid],
        discount=settings.DEFAULT_DISCOUNT if discount is None else discount,
    )


async def _render_creator_page(
    request: Request,
    service: BundleService,
    draft: BundleDraft,
    *,
    modal_open: bool = False,
    view: Optional[str] = None,
    created: Optional[str] = None,
    error: Optional[str] = None,
    status_code: int = 200,
):
    products = await service.list_available_products()
    bundles = await service.list_bundles()

    context = {
        "page_title": "Smart Bundle Creator",
        "products": products,
        "bundles": bundles,
        "selected_bundle": _find_bundle(bundles, view),
        "draft": draft,
        "preview": draft.preview(products),
        "modal_open": modal_open,
        "created": created,
        "error": error,
    }
    return templates.TemplateResponse(request, "bundles/creator.html", context, status_code=status_code)


@router.get("/bundles")
async def bundle_creator(
    request: Request,
    view: Optional[str] = None,
    created: Optional[str] = None,
    service: BundleService = Depends(get_bundle_service),
    settings: Settings = Depends(get_settings),
):
    """Created bundles and the products available for a new one"""
    draft = BundleDraft(discount=settings.DEFAULT_DISCOUNT)
    return await _render_creator_page(request, service, draft, view=view, created=created)


@router.post("/bundles/draft")
async def update_draft(
    request: Request,
    action: DraftAction = Form(DraftAction.UPDATE),
    product_id: Optional[str] = Form(None),
    remove: Optional[str] = Form(None),
    name: str = Form(""),
    description: str = Form(""),
    discount: Optional[int] = Form(None),
    selected_products: List[str] = Form([]),
    view: Optional[str] = Form(None),
    service: BundleService = Depends(get_bundle_service),
    settings: Settings = Depends(get_settings),
):
    """Add to bundle, remove from selection, open, refresh or cancel the create modal; open or close bundle details"""
    if remove:
        action, product_id = DraftAction.REMOVE, remove

    draft = _draft_from_form(name, description, selected_products, discount, settings)
    modal_open = apply_draft_action(draft, action, product_id, default_discount=settings.DEFAULT_DISCOUNT)
    return await _render_creator_page(
        request, service, draft,
        modal_open=modal_open,
        view=view if action == DraftAction.VIEW else None,
    )


@router.post("/bundles")
async def create_bundle(
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    discount: Optional[int] = Form(None),
    selected_products: List[str] = Form([]),
    service: BundleService = Depends(get_bundle_service),
    settings: Settings = Depends(get_settings),
):
    """Create the bundle product; on success reload the page with a confirmation"""
    draft = _draft_from_form(name, description, selected_products, discount, settings)

    if not draft.can_submit:
        logger.info("Rejected bundle creation: missing name or products")
        return await _render_creator_page(
            request, service, draft,
            modal_open=True,
            error="Enter a bundle name and add at least one product.",
            status_code=400,
        )

    try:
        created = await service.create_bundle(draft.to_bundle_create())
    except (BundleCreationError, ValidationError) as e:
        logger.warning(f"Bundle creation failed: {e}")
        return await _render_creator_page(
            request, service, draft,
            modal_open=True,
            error=str(e),
            status_code=400,
        )

    return RedirectResponse(url=f"/app/bundles?{urlencode({'created': created.title})}", status_code=303)


@router.get("/created-bundles")
async def created_bundles(
    request: Request,
    view: Optional[str] = None,
    service: BundleService = Depends(get_bundle_service),
):
    """List-only view of the created bundles"""
    bundles = await service.list_bundles()
    context = {
        "page_title": "Created Bundles",
        "bundles": bundles,
        "selected_bundle": _find_bundle(bundles, view),
    }
    return templates.TemplateResponse(request, "bundles/created_bundles.html", context)
