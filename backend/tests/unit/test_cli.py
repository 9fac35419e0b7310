"""Tests for the command-line front end."""

import json
import pytest

from backend.app.cli import build_parser, main, render_gauge, render_inventory, run_command
from backend.app.services.filament_client import (
    FilamentClient,
    FilamentClientError,
    FilamentImportError,
    FilamentInventory,
)
from backend.app.services.view_state import AppState, FormDraft, NoModal, UseModal


@pytest.fixture
async def inventory(asgi_transport):
    async with FilamentClient("http://test", transport=asgi_transport) as client:
        yield FilamentInventory(client)


async def _run(inventory, *argv, state=None):
    return await run_command(build_parser().parse_args(list(argv)), inventory, state)


class TestRendering:
    def test_gauge(self):
        assert render_gauge(0) == "[" + "-" * 20 + "]"
        assert render_gauge(100) == "[" + "#" * 20 + "]"
        assert render_gauge(25) == "[" + "#" * 5 + "-" * 15 + "]"

    def test_sections_and_placeholders(self):
        text = render_inventory([])
        assert "No available filaments." in text
        assert "No empty filaments." in text

    def test_search_and_partition(self):
        filaments = [
            {"id": 1, "name": "PLA Red", "currentMass": 0, "startMass": 1000},
            {"id": 2, "name": "PLA Blue", "currentMass": 250, "startMass": 1000},
            {"id": 3, "name": "ABS White", "currentMass": 500, "startMass": 1000},
        ]
        text = render_inventory(filaments, "pla")
        available, empty = text.split("Empty filaments")
        assert "PLA Blue" in available and " 25.0%" in available
        assert "PLA Red" in empty and "100.0%" in empty
        assert "ABS White" not in text

    def test_imported_string_masses(self):
        filaments = [{"id": 1, "name": "Imported", "startMass": "1000", "currentMass": "500"}]
        text = render_inventory(filaments)
        available, empty = text.split("Empty filaments")
        assert "Imported" in available and " 50.0%" in available
        assert "500.00 g" in available
        assert "No empty filaments." in empty


class TestCommands:
    @pytest.mark.asyncio
    async def test_add_then_use(self, inventory, store):
        out = await _run(inventory, "add", "PLA Red", "--brand", "Bambu", "--start-mass", "500")
        assert out.startswith("Added filament")
        filament_id = store.load_all()[0]["id"]

        out = await _run(inventory, "use", str(filament_id), "200")
        assert "300.00 g left" in out

        out = await _run(inventory, "use", str(filament_id), "abc")
        assert out == "Nothing to update."

    @pytest.mark.asyncio
    async def test_edit_and_delete(self, inventory, filament_factory, store):
        filament = filament_factory()
        await _run(inventory, "edit", str(filament["id"]), "notes", "half used")
        assert store.load_all()[0]["notes"] == "half used"

        await _run(inventory, "delete", str(filament["id"]))
        assert store.load_all() == []

    @pytest.mark.asyncio
    async def test_import_export(self, inventory, store, tmp_path):
        source = tmp_path / "in.json"
        source.write_text(json.dumps([{"id": 1, "name": "A"}]), encoding="utf-8")
        await _run(inventory, "import", str(source))
        assert store.load_all() == [{"id": 1, "name": "A"}]

        target = tmp_path / "out.json"
        await _run(inventory, "export", str(target))
        assert json.loads(target.read_text(encoding="utf-8")) == [{"id": 1, "name": "A"}]


    @pytest.mark.asyncio
    async def test_add_clears_form_and_closes_modal(self, inventory, store):
        state = AppState()
        await _run(inventory, "add", "PETG", "--copies", "2", state=state)
        assert state.draft == FormDraft()
        assert state.modal == NoModal()
        assert store.load_all()[0]["copies"] == 2

    @pytest.mark.asyncio
    async def test_use_targets_the_modal_filament(self, inventory, filament_factory):
        filament = filament_factory(currentMass=500)
        state = AppState()
        await _run(inventory, "use", str(filament["id"]), "abc", state=state)
        assert state.modal == UseModal(filament["id"])
        assert state.targeted_filament_id == filament["id"]

    @pytest.mark.asyncio
    async def test_use_unknown_id(self, inventory):
        assert await _run(inventory, "use", "123", "10") == "Filament not found."

    @pytest.mark.asyncio
    async def test_show(self, inventory, filament_factory):
        filament = filament_factory(name="PLA Red", brand="Bambu")
        out = await _run(inventory, "show", str(filament["id"]))
        assert f"Filament {filament['id']}" in out
        assert "brand: Bambu" in out
        assert await _run(inventory, "show", "1") == "Filament not found."

    @pytest.mark.asyncio
    async def test_import_missing_file(self, inventory, tmp_path):
        with pytest.raises(FilamentImportError, match="Could not read"):
            await _run(inventory, "import", str(tmp_path / "nope.json"))

    @pytest.mark.asyncio
    async def test_export_to_missing_directory(self, inventory, tmp_path):
        with pytest.raises(FilamentClientError, match="Could not write"):
            await _run(inventory, "export", str(tmp_path / "missing" / "out.json"))


class TestMain:
    def test_missing_import_file_exits_nonzero(self, tmp_path, capsys):
        missing = tmp_path / "nope.json"
        assert main(["--url", "http://127.0.0.1:9", "import", str(missing)]) == 1
        captured = capsys.readouterr()
        assert "Could not read" in captured.err
        assert "Traceback" not in captured.err

    def test_invalid_import_document_exits_nonzero(self, tmp_path, capsys):
        bad = tmp_path / "bad.json"
        bad.write_text("{}", encoding="utf-8")
        assert main(["--url", "http://127.0.0.1:9", "import", str(bad)]) == 1
        assert "Invalid JSON file" in capsys.readouterr().err
