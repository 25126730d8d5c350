import asyncio

from ..config import settings
from ..models import Model
from .browser import BrowserSession
from .dom import SnapshotDom
from .model_builder import ModelBuilder
from .page_snapshot import PageSnapshot, parse_html
from .profiles import ProfileRegistry, get_profile_registry


def build_model_for_snapshot(
    snapshot: PageSnapshot,
    profile: str | None = None,
    profiles: ProfileRegistry | None = None,
    existing_model: Model | None = None,
) -> Model | None:
    builder = ModelBuilder(
        SnapshotDom(snapshot),
        profiles=profiles if profiles is not None else get_profile_registry(),
    )
    return builder.create_model(
        element=snapshot.root,
        active_profile=profile or settings.active_profile,
        existing_model=existing_model,
    )


def build_model_for_html(
    html: str,
    root_selector: str | None = None,
    profile: str | None = None,
    profiles: ProfileRegistry | None = None,
) -> Model | None:
    """
    Build a model from static HTML. Visibility is approximated from markup.

    Without ``root_selector`` the scan starts at ``<body>``, or at the document
    element for fragments that have none.
    """

    snapshot = parse_html(html, root_selector=root_selector)
    if snapshot is None:
        return None
    return build_model_for_snapshot(snapshot, profile=profile, profiles=profiles)


async def build_model_for_url(
    url: str,
    root_selector: str | None = None,
    profile: str | None = None,
    profiles: ProfileRegistry | None = None,
) -> Model | None:
    """Open ``url`` in a browser, capture the region under ``root_selector`` and model it."""

    print(f"[orchestrator] Building model for url={url} selector={root_selector or settings.root_selector}")

    async with BrowserSession() as session:
        await session.goto(url)
        snapshot = await session.capture_snapshot(root_selector)

    if snapshot is None:
        return None
    return build_model_for_snapshot(snapshot, profile=profile, profiles=profiles)


def build_model_for_url_blocking(
    url: str,
    root_selector: str | None = None,
    profile: str | None = None,
    profiles: ProfileRegistry | None = None,
) -> Model | None:
    """Synchronous wrapper for CLI usage."""

    return asyncio.run(build_model_for_url(url, root_selector=root_selector, profile=profile, profiles=profiles))
