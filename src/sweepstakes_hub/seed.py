"""Demo catalogue used to seed a fresh development database."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from sweepstakes_hub.core.database import DatabaseManager
from sweepstakes_hub.schemas.competition import validate_form
from sweepstakes_hub.services.competition_service import CompetitionService

logger = logging.getLogger(__name__)

DEMO_COMPETITIONS: List[Dict[str, Any]] = [
    {
        "title": "Summer Photography Contest",
        "imageUrl": "https://images.unsplash.com/photo-1500835556837-99ac94a94552?w=800&q=80",
        "endDate": "2023-08-15",
        "prizeValue": "$5,000",
        "category": "Photography",
        "difficulty": "Easy",
        "requirements": "Submit up to 3 original summer-themed photographs.\n"
        "Photos must be high resolution (min 3000px width).",
        "description": "Capture the essence of summer in this photography contest with cash prizes "
        "and featured exhibition opportunities.",
        "rules": ["One entry per person", "Photos taken within the last 12 months"],
    },
    {
        "title": "Tech Innovation Challenge",
        "imageUrl": "https://images.unsplash.com/photo-1518770660439-4636190af475?w=800&q=80",
        "endDate": "2023-09-30",
        "prizeValue": "$25,000",
        "category": "Technology",
        "difficulty": "Hard",
        "requirements": "Submit a working prototype and business plan.\nTeams of 1-4 people allowed.",
        "description": "Showcase your innovative tech solutions and win funding to bring your ideas to life.",
        "rules": ["Prototype must be functional", "Business plan of at most 10 pages"],
    },
    {
        "title": "Culinary Creations Sweepstakes",
        "imageUrl": "https://images.unsplash.com/photo-1556911220-bff31c812dba?w=800&q=80",
        "endDate": "2023-07-31",
        "prizeValue": "$2,500",
        "category": "Food",
        "difficulty": "Medium",
        "requirements": "Submit an original recipe with photos of the finished dish.",
        "description": "Create delicious recipes using our sponsor products and win kitchen appliances "
        "and cash prizes.",
        "rules": ["Recipe must include the sponsor's product"],
    },
    {
        "title": "Fitness Transformation Challenge",
        "imageUrl": "https://images.unsplash.com/photo-1517836357463-d25dfeac3438?w=800&q=80",
        "endDate": "2023-10-15",
        "prizeValue": "$10,000",
        "category": "Fitness",
        "difficulty": "Hard",
        "requirements": "Document your 12-week fitness journey with weekly updates.",
        "description": "Transform your body and life in our 12-week challenge with expert coaching.",
        "rules": ["Weekly progress photos", "Training and nutrition log"],
    },
    {
        "title": "Short Story Competition",
        "imageUrl": "https://images.unsplash.com/photo-1457369804613-52c61a468e7d?w=800&q=80",
        "endDate": "2023-08-31",
        "prizeValue": "$3,000",
        "category": "Writing",
        "difficulty": "Medium",
        "requirements": 'Submit an original short story on the theme "Beginnings".',
        "description": "Share your creative writing talents in our annual short story competition.",
        "rules": ["2,000-5,000 words", "Previously unpublished"],
    },
    {
        "title": "Travel Photography Contest",
        "imageUrl": "https://images.unsplash.com/photo-1469854523086-cc02fe5d8800?w=800&q=80",
        "endDate": "2023-08-01",
        "prizeValue": "$4,000",
        "category": "Photography",
        "difficulty": "Easy",
        "requirements": "Submit up to 5 travel photographs that tell a story about a place or culture.",
        "description": "Share your travel experiences through photography and win camera equipment.",
        "rules": ["Include location details for each photo"],
        "status": "past",
    },
]


async def seed_demo(db: DatabaseManager) -> int:
    """Insert the demo catalogue when the competitions table is empty. Returns rows created."""
    service = CompetitionService(db)
    if await service.list():
        logger.info("Competitions table not empty; skipping demo seed")
        return 0
    for payload in DEMO_COMPETITIONS:
        await service.create(validate_form(payload))
    logger.info("Seeded %d demo competitions", len(DEMO_COMPETITIONS))
    return len(DEMO_COMPETITIONS)
