# seed script: creates demo profiles, a patient link, and ~60 days of events
# run once: python -m steadylog.seed

import asyncio
import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Optional

from steadylog.config import settings
from steadylog.services.db import db
from steadylog.services.connection_codes import generate_code

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

FAMILY_ID = "demo-family-0001"
PROFESSIONAL_ID = "demo-professional-0001"

# (event type, share of events, typical intensity)
EVENT_PATTERNS = [
    ("good_day", 0.45, 2),
    ("anxiety", 0.25, 5),
    ("meltdown", 0.15, 7),
    ("crisis", 0.15, 8),
]

TRIGGER_POOL = ["noise", "sleep", "routine", "hunger", "anger", "social", "school", "transition"]

NOTE_TEMPLATES = {
    "crisis": [
        "Intense episode after a change in routine. Needed 30 minutes to calm down.",
        "Sensory overload set it off. Breathing exercises helped.",
        "Hard moment during a group activity, recovered with support.",
    ],
    "anxiety": [
        "Signs of anxiety before school, better after we talked.",
        "Mild anxiety at dinner. Distraction strategies worked.",
        "Worried about a change of plans. Explaining it helped.",
    ],
    "meltdown": [
        "Meltdown after an unexpected transition. Needed a quiet space.",
        "Episode during a school activity, the teacher stepped in.",
        "Sensory overload at the supermarket, we left quickly.",
    ],
    "good_day": [
        "Calm day, followed the routine without trouble.",
        "Great day! Took part in every activity.",
        "Positive day with good emotional regulation.",
    ],
}

LOCATIONS = ["Home", "School", "Supermarket", "Park", None]


def _pick_type(rng: random.Random) -> tuple[str, int]:
    roll = rng.random()
    cumulative = 0.0
    for event_type, weight, base_intensity in EVENT_PATTERNS:
        cumulative += weight
        if roll <= cumulative:
            return event_type, base_intensity
    return "good_day", 2


def generate_demo_events(
    owner_id: str,
    days: int = 60,
    today: Optional[datetime] = None,
    seed: int = 7,
) -> list[dict]:
    """build event documents for the last `days` days, newest first.
    most days get one or two events between 08:00 and 19:59 utc."""
    rng = random.Random(seed)
    today = today or datetime.now(timezone.utc)

    events = []
    for offset in range(days, -1, -1):
        day = today - timedelta(days=offset)
        per_day = rng.randint(1, 2) if rng.random() > 0.3 else 0

        for _ in range(per_day):
            event_type, base_intensity = _pick_type(rng)
            intensity = min(10, max(1, base_intensity + rng.randint(-2, 1)))
            trigger_count = 0 if event_type == "good_day" else rng.randint(1, 3)
            moment = day.replace(hour=rng.randint(8, 19), minute=rng.randint(0, 59), second=0, microsecond=0)

            events.append({
                "owner_id": owner_id,
                "timestamp": moment.isoformat(),
                "type": event_type,
                "intensity": intensity,
                "triggers": rng.sample(TRIGGER_POOL, trigger_count),
                "notes": rng.choice(NOTE_TEMPLATES[event_type]),
                "location": rng.choice(LOCATIONS),
                "created_at": moment.isoformat(),
            })

    return sorted(events, key=lambda e: e["timestamp"], reverse=True)


async def seed():
    """create a demo family + professional pair and their event history, skips existing"""
    await db.connect()

    family = await db.profiles.find_one({"_id": FAMILY_ID})
    if family:
        logger.info(f"Family profile already exists: {FAMILY_ID}")
    else:
        await db.profiles.insert_one({
            "_id": FAMILY_ID,
            "email": "family.demo@steadylog.app",
            "name": "Lucas Silva",
            "role": "family",
            "connection_code": generate_code(settings.CONNECTION_CODE_LENGTH),
            "created_at": datetime.now(timezone.utc).isoformat(),
        })
        logger.info(f"Created family profile: {FAMILY_ID}")

    professional = await db.profiles.find_one({"_id": PROFESSIONAL_ID})
    if professional:
        logger.info(f"Professional profile already exists: {PROFESSIONAL_ID}")
    else:
        await db.profiles.insert_one({
            "_id": PROFESSIONAL_ID,
            "email": "dr.demo@steadylog.app",
            "name": "Dr. Ana Costa",
            "role": "professional",
            "created_at": datetime.now(timezone.utc).isoformat(),
        })
        logger.info(f"Created professional profile: {PROFESSIONAL_ID}")

    link_query = {"professional_id": PROFESSIONAL_ID, "patient_id": FAMILY_ID}
    if not await db.patient_links.find_one(link_query):
        await db.patient_links.insert_one({
            **link_query,
            "nickname": "Lucas (school)",
            "created_at": datetime.now(timezone.utc).isoformat(),
        })
        logger.info("Linked demo professional to demo family")

    existing = await db.events.count_documents({"owner_id": FAMILY_ID})
    if existing:
        logger.info(f"Demo family already has {existing} events, skipping event seed")
    else:
        events = generate_demo_events(FAMILY_ID)
        await db.events.insert_many(events)
        logger.info(f"Inserted {len(events)} demo events")

    await db.close()


if __name__ == "__main__":
    asyncio.run(seed())
