from typing import Callable

from fastapi import Depends, Request

from app.services.marketplace import Marketplace


def get_marketplace(request: Request) -> Marketplace:
    return request.app.state.marketplace


def ensure_seeded(*entity_names: str) -> Callable:
    """Router dependency: seeds the named entity types before the first request touches them."""

    async def dependency(marketplace: Marketplace = Depends(get_marketplace)) -> None:
        entities = marketplace.entities
        for name in entity_names:
            await getattr(entities, name).ensure_seed()

    return dependency
