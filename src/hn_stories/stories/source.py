"""Protocol for the upstream item source. The core only talks to this."""
from typing import List, Optional, Protocol

from hn_stories.core.schemas import Story


class ItemSource(Protocol):
    """Read-only index of newest IDs plus a per-ID lookup.

    Implementations raise UpstreamError on transport/protocol failure and
    return None (not an error) for items that do not exist or are filtered
    out (non-story, dead, deleted).
    """

    async def list_newest_ids(self) -> List[int]:
        """Full ordered ID list, newest first."""
        ...

    async def get_item(self, item_id: int) -> Optional[Story]:
        ...
