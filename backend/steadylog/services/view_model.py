# view model: what the home screen needs, built once per session
# the role decides the variant, tagged by `kind`

import logging

from steadylog.config import settings
from steadylog.models.session import FamilyView, ProfessionalView, SessionContext
from steadylog.services.db import Database
from steadylog.services.records import event_from_doc, fetch_events, linked_patients

logger = logging.getLogger(__name__)


async def build_view_model(session: SessionContext, db: Database) -> FamilyView | ProfessionalView:
    if session.is_professional:
        return ProfessionalView(
            userId=session.user_id,
            name=session.name,
            patients=await linked_patients(db, session.user_id),
        )

    recent = await fetch_events(db, session.user_id, ascending=False, limit=settings.RECENT_EVENTS_LIMIT)
    return FamilyView(
        userId=session.user_id,
        name=session.name,
        connectionCode=session.connection_code,
        recentEvents=[event_from_doc(doc) for doc in recent],
    )
