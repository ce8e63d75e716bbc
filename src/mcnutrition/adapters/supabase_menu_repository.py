"""Supabase implementation for menu records."""

from dataclasses import dataclass

from supabase import Client

from mcnutrition.domain.menu import MenuItem
from mcnutrition.services.catalog import MenuRepository

_TABLE = "menu"


@dataclass
class SupabaseMenuRepository(MenuRepository):
    """Supabase-backed repository for menu records."""

    client: Client

    def list_items(self) -> list[MenuItem]:
        """Return all menu records, newest first."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .order("created_at", desc=True)
            .execute()
        )
        return [MenuItem.from_record(row) for row in response.data or []]

    def search_items(self, term: str, limit: int) -> list[MenuItem]:
        """Return records whose name contains the term, ordered by name."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .ilike("ITEM", f"%{term}%")
            .order("ITEM")
            .limit(limit)
            .execute()
        )
        return [MenuItem.from_record(row) for row in response.data or []]

    def create_item(self, record: dict[str, object]) -> MenuItem:
        response = self.client.table(_TABLE).insert(record).execute()
        if not response.data:
            raise RuntimeError("Failed to create menu record")
        return MenuItem.from_record(response.data[0])

    def update_item(self, item_id: str, record: dict[str, object]) -> MenuItem | None:
        response = (
            self.client.table(_TABLE).update(record).eq("id", item_id).execute()
        )
        if not response.data:
            return None
        return MenuItem.from_record(response.data[0])

    def delete_item(self, item_id: str) -> MenuItem | None:
        response = self.client.table(_TABLE).delete().eq("id", item_id).execute()
        if not response.data:
            return None
        return MenuItem.from_record(response.data[0])
