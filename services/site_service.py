# services/site_service.py
from typing import Iterable, Optional

import structlog
from sqlalchemy.orm import Session

from errors import NotFoundError, ValidationError
from models import Site
from services.authorization import require_manager, visible_site_ids

logger = structlog.get_logger(__name__)


class SiteService:
     """Site reference data, scoped the same way faults are."""

     @staticmethod
     def get_site(db: Session, site_id: str) -> Site:
          site = db.get(Site, site_id) if site_id else None
          if site is None:
               raise NotFoundError()
          return site

     @staticmethod
     def list_sites(db: Session, user) -> list[Site]:
          """Customers get their own sites; every other role gets all of them."""
          allowed = visible_site_ids(user)
          query = db.query(Site)
          if allowed is not None:
               if not allowed:
                    return []
               query = query.filter(Site.id.in_(allowed))
          return query.order_by(Site.name).all()

     @staticmethod
     def site_name_map(db: Session, site_ids: Optional[Iterable[str]] = None) -> dict[str, str]:
          query = db.query(Site.id, Site.name)
          if site_ids is not None:
               ids = set(site_ids)
               if not ids:
                    return {}
               query = query.filter(Site.id.in_(ids))
          return {site_id: name for site_id, name in query.all()}

     @staticmethod
     def create_site(db: Session, actor, name: str) -> Site:
          require_manager(actor)
          if not (name or "").strip():
               raise ValidationError("validation/required-field")

          site = Site(name=name.strip())
          db.add(site)
          db.flush()
          logger.info("site_created", site_id=site.id, actor_id=actor.id)
          return site
