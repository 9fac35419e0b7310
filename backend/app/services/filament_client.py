"""Client for the Spooly HTTP API and the in-memory collection built on it."""

import json
import logging

import httpx

from backend.app.services.inventory import parse_amount, remaining_after_use
from backend.app.services.view_state import FormDraft

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "filaments.json"
MASS_FIELDS = ("startMass", "currentMass")


class FilamentClientError(Exception):
    """Base class for errors shown to the user."""


class FilamentValidationError(FilamentClientError):
    """Form input rejected before any request was sent."""


class FilamentImportError(FilamentClientError):
    """Import document could not be used."""


class FilamentRequestError(FilamentClientError):
    """The backend refused or failed a request."""


class FilamentClient:
    """Thin async wrapper over the /api/filaments endpoints."""

    def __init__(self, base_url: str, transport: httpx.AsyncBaseTransport | None = None):
        """Initialize the client.

        Args:
            base_url: Server root, e.g. http://localhost:4000
            transport: Optional httpx transport (tests pass an ASGITransport)
        """
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}/api/filaments"
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=10.0, transport=self._transport)
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    async def list_filaments(self) -> list[dict]:
        client = await self._get_client()
        response = await client.get(self.api_url)
        response.raise_for_status()
        return response.json()

    async def create_filament(self, data: dict) -> dict:
        client = await self._get_client()
        response = await client.post(self.api_url, json=data)
        response.raise_for_status()
        return response.json()

    async def update_filament(self, filament_id: int, data: dict) -> dict:
        client = await self._get_client()
        response = await client.put(f"{self.api_url}/{filament_id}", json=data)
        response.raise_for_status()
        return response.json()

    async def delete_filament(self, filament_id: int) -> dict:
        client = await self._get_client()
        response = await client.delete(f"{self.api_url}/{filament_id}")
        response.raise_for_status()
        return response.json()

    async def import_filaments(self, filaments: list) -> dict:
        client = await self._get_client()
        response = await client.post(f"{self.api_url}/import", json=filaments)
        response.raise_for_status()
        return response.json()


class FilamentInventory:
    """Last-known copy of the backend collection.

    Seeded once with refresh(), then patched from each mutation's response.
    Nothing is rolled back if a request fails.
    """

    def __init__(self, client: FilamentClient):
        self.client = client
        self.filaments: list[dict] = []

    def get(self, filament_id: int) -> dict | None:
        return next((f for f in self.filaments if f.get("id") == filament_id), None)

    async def refresh(self) -> list[dict]:
        try:
            self.filaments = await self.client.list_filaments()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Could not load filaments, showing an empty list: {e}")
            self.filaments = []
        return self.filaments

    async def add_filament(self, draft: FormDraft) -> dict:
        if not draft.name.strip():
            raise FilamentValidationError("Please provide a filament name.")

        try:
            saved = await self.client.create_filament(draft.to_payload())
        except httpx.HTTPError as e:
            raise FilamentRequestError(f"Failed to add filament: {e}") from e

        self.filaments = [saved, *self.filaments]
        return saved

    async def update_filament(self, filament_id: int, data: dict) -> dict:
        try:
            updated = await self.client.update_filament(filament_id, data)
        except httpx.HTTPError as e:
            raise FilamentRequestError(f"Update failed: {e}") from e

        self.filaments = [updated if f.get("id") == updated.get("id") else f for f in self.filaments]
        return updated

    async def delete_filament(self, filament_id: int) -> None:
        try:
            await self.client.delete_filament(filament_id)
        except httpx.HTTPError as e:
            logger.warning(f"Delete of filament {filament_id} failed: {e}")
            raise FilamentRequestError("Failed to delete filament") from e

        self.filaments = [f for f in self.filaments if f.get("id") != filament_id]

    async def use_filament(self, filament_id: int, used_mass) -> dict | None:
        """Subtract used grams from a spool, never going below zero.

        Invalid amounts and unknown ids are ignored and send nothing.
        """
        filament = self.get(filament_id)
        if filament is None:
            return None
        new_mass = remaining_after_use(filament.get("currentMass"), used_mass)
        if new_mass is None:
            return None
        return await self.update_filament(filament_id, {"currentMass": new_mass})

    async def edit_mass(self, filament_id: int, field: str, value) -> dict | None:
        """Directly set startMass or currentMass. Negative or non-numeric input is ignored."""
        if field not in MASS_FIELDS:
            raise ValueError(f"Not a mass field: {field}")
        number = parse_amount(value)
        if number is None or number < 0:
            return None
        return await self.update_filament(filament_id, {field: number})

    async def import_document(self, text: str) -> list:
        try:
            imported = json.loads(text)
        except ValueError:
            raise FilamentImportError("Invalid JSON file") from None
        if not isinstance(imported, list):
            raise FilamentImportError("Invalid JSON file")

        try:
            await self.client.import_filaments(imported)
        except httpx.HTTPError as e:
            raise FilamentRequestError(f"Import failed: {e}") from e

        self.filaments = imported
        return imported

    def export_document(self) -> str:
        """Serialize what this client currently holds, not what the server has."""
        return json.dumps(self.filaments)
