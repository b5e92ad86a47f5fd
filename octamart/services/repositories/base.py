"""Base repository with shared Supabase client."""

from supabase._async.client import AsyncClient


class BaseRepository:
    """Base class for all repositories.

    All queries go through the async client and must be awaited.
    """

    table_name: str = ""

    def __init__(self, client: AsyncClient) -> None:
        self.client = client

    def table(self):
        return self.client.table(self.table_name)

    @staticmethod
    def page_range(page: int, limit: int) -> tuple[int, int]:
        """Inclusive row range for a 1-based page."""
        page = max(page, 1)
        offset = (page - 1) * limit
        return offset, offset + limit - 1
