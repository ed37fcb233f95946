"""Default catalog content, written once when the catalog is empty."""

import structlog

from warden.domain.repositories.game_repository import GameRepository

logger = structlog.get_logger(__name__)

DEFAULT_GAMES = [
    {
        "title": "Grand Theft Auto 5",
        "image_url": "https://images.unsplash.com/photo-1593305841991-05c297bb45ec?auto=format&fit=crop&q=80&w=1000",
        "download_url": "https://www.rockstargames.com/gta-v",
        "category": "PC",
        "developer": "From: FitGirl",
        "description": "The biggest open world game ever created.",
    },
    {
        "title": "Elder Scrolls 4: Oblivion Remaster",
        "image_url": "https://images.unsplash.com/photo-1627856013091-fed6e4e30025?auto=format&fit=crop&q=80&w=1000",
        "download_url": "https://bethesda.net",
        "category": "PC",
        "developer": "From: FitGirl",
        "description": "A classic RPG remastered for modern systems.",
    },
    {
        "title": "The Last of Us: Part 1",
        "image_url": "https://images.unsplash.com/photo-1552820728-8b83bb6b773f?auto=format&fit=crop&q=80&w=1000",
        "download_url": "https://www.playstation.com",
        "category": "PC",
        "developer": "From: FitGirl",
        "description": "Experience the emotional storytelling and unforgettable characters.",
    },
    {
        "title": "The Last of Us: Part 2 Remastered",
        "image_url": "https://images.unsplash.com/photo-1509198397868-475647b2a1e5?auto=format&fit=crop&q=80&w=1000",
        "download_url": "https://www.playstation.com",
        "category": "PC",
        "developer": "From: FitGirl",
        "description": "Five years after their dangerous journey across the post-pandemic United States...",
    },
    {
        "title": "Minecraft Pocket Edition",
        "image_url": "https://images.unsplash.com/photo-1607853202273-797f1c22a38e?auto=format&fit=crop&q=80&w=1000",
        "download_url": "https://www.minecraft.net",
        "category": "Android",
        "developer": "Mojang",
        "description": "Build anything you can imagine.",
    },
    {
        "title": "Adobe Photoshop 2024",
        "image_url": "https://images.unsplash.com/photo-1563986768609-322da13575f3?auto=format&fit=crop&q=80&w=1000",
        "download_url": "https://www.adobe.com",
        "category": "Programs",
        "developer": "Adobe",
        "description": "The world's best imaging and graphic design software.",
    },
]


def seed_catalog(repo: GameRepository) -> int:
    """Insert the default entries if the catalog is empty. Returns rows inserted.

    Two instances starting against the same empty database can both seed.
    """
    if repo.count() > 0:
        return 0
    for game in DEFAULT_GAMES:
        repo.create(game)
    logger.info("Catalog seeded with default games", count=len(DEFAULT_GAMES))
    return len(DEFAULT_GAMES)
