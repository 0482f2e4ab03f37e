"""Site registry reader - supplies the active sites for a pass."""
import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from ..database import async_session
from ..errors import RegistryUnavailableError
from ..models import Site, ACTIVE_LIFECYCLE_STATUSES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SiteInfo:
    """Immutable snapshot of a site for the duration of a pass."""
    id: str
    domain: str
    name: str
    status: str = "production"
    bu_name: Optional[str] = None

    @classmethod
    def from_model(cls, site: Site) -> "SiteInfo":
        return cls(
            id=site.id,
            domain=site.domain,
            name=site.name,
            status=site.status,
            bu_name=site.bu_name,
        )


class SiteRegistry:
    """Reads sites from the registry tables."""

    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        self.session_factory = session_factory or async_session

    async def list_active_sites(self) -> List[SiteInfo]:
        """Sites in production, development or staging, ordered by name.

        Raises:
            RegistryUnavailableError: if the registry cannot be read
        """
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(Site)
                    .where(Site.status.in_(ACTIVE_LIFECYCLE_STATUSES))
                    .order_by(Site.name)
                )
                return [SiteInfo.from_model(site) for site in result.scalars().all()]
        except Exception as e:
            logger.error(f"Failed to fetch sites: {e}")
            raise RegistryUnavailableError(f"Failed to fetch sites: {e}") from e
