#!/usr/bin/env python3
"""Command-line front end for a running Spooly server."""

import argparse
import asyncio
import sys
from pathlib import Path

from backend.app.core.config import settings
from backend.app.services.filament_client import (
    EXPORT_FILENAME,
    MASS_FIELDS,
    FilamentClient,
    FilamentClientError,
    FilamentImportError,
    FilamentInventory,
)
from backend.app.services.inventory import (
    gauge_percent,
    mass_of,
    partition_filaments,
    search_filaments,
    spool_colour,
)
from backend.app.services.view_state import (
    AddModal,
    AppState,
    FormDraft,
    InfoModal,
    SettingsModal,
    UseModal,
)

GAUGE_WIDTH = 20
TEXT_FIELDS = ("name", "brand", "material", "color", "notes")
INFO_FIELDS = ("name", "brand", "material", "color", "startMass", "currentMass", "copies", "notes")


def render_gauge(percent: float) -> str:
    filled = round(GAUGE_WIDTH * percent / 100)
    return "[" + "#" * filled + "-" * (GAUGE_WIDTH - filled) + "]"


def render_filament(filament: dict) -> str:
    percent = gauge_percent(filament)
    return (
        f"{render_gauge(percent)} {percent:5.1f}%  "
        f"{filament.get('id')}  {filament.get('name', '')}"
        f"  ({filament.get('brand') or '-'}, {filament.get('material') or '-'}, {spool_colour(filament)})"
        f"  {mass_of(filament, 'currentMass'):.2f} g"
    )


def render_inventory(filaments: list[dict], query: str = "") -> str:
    available, empty = partition_filaments(search_filaments(filaments, query))
    lines = ["Available filaments"]
    lines += [render_filament(f) for f in available] or ["No available filaments."]
    lines += ["", "Empty filaments"]
    lines += [render_filament(f) for f in empty] or ["No empty filaments."]
    return "\n".join(lines)


def render_info(filament: dict | None) -> str:
    if filament is None:
        return "Filament not found."
    lines = [f"Filament {filament.get('id')}"]
    lines += [f"  {field}: {filament.get(field, '')}" for field in INFO_FIELDS]
    return "\n".join(lines)


def _read_document(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise FilamentImportError(f"Could not read {path}: {e.strerror or e}") from e


async def run_command(
    args: argparse.Namespace,
    inventory: FilamentInventory,
    state: AppState | None = None,
) -> str:
    state = state or AppState()

    if args.command == "import":
        # Read the file before talking to the server
        state.open(SettingsModal())
        imported = await inventory.import_document(_read_document(args.file))
        state.close_modal()
        return f"Imported {len(imported)} filaments"

    await inventory.refresh()

    if args.command == "list":
        state.search = args.search
        return render_inventory(inventory.filaments, state.search)

    if args.command == "show":
        state.open(InfoModal(args.id))
        return render_info(inventory.get(state.targeted_filament_id))

    if args.command == "add":
        state.open(AddModal())
        state.draft = FormDraft(
            name=args.name,
            brand=args.brand,
            material=args.material,
            color=args.color,
            notes=args.notes,
            copies=args.copies,
            startMass=args.start_mass,
        )
        saved = await inventory.add_filament(state.draft)
        state.reset_draft()
        state.close_modal()
        return f"Added filament {saved['id']}: {saved.get('name', '')}"

    if args.command == "use":
        state.open(UseModal(args.id))
        if inventory.get(state.targeted_filament_id) is None:
            return "Filament not found."
        updated = await inventory.use_filament(state.targeted_filament_id, args.grams)
        if updated is None:
            return "Nothing to update."
        state.close_modal()
        return f"{updated.get('name', '')}: {mass_of(updated, 'currentMass'):.2f} g left"

    if args.command == "edit":
        state.open(InfoModal(args.id))
        if args.field in MASS_FIELDS:
            updated = await inventory.edit_mass(state.targeted_filament_id, args.field, args.value)
        else:
            updated = await inventory.update_filament(state.targeted_filament_id, {args.field: args.value})
        if updated is None:
            return "Nothing to update."
        return f"Updated {args.field} of filament {args.id}"

    if args.command == "delete":
        state.open(InfoModal(args.id))
        await inventory.delete_filament(state.targeted_filament_id)
        state.close_modal()
        return f"Deleted filament {args.id}"

    if args.command == "export":
        state.open(SettingsModal())
        try:
            Path(args.file).write_text(inventory.export_document(), encoding="utf-8")
        except OSError as e:
            raise FilamentClientError(f"Could not write {args.file}: {e.strerror or e}") from e
        state.close_modal()
        return f"Exported {len(inventory.filaments)} filaments to {args.file}"

    raise ValueError(f"Unknown command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="spooly", description="Manage filament spools")
    parser.add_argument("--url", default=f"http://localhost:{settings.port}", help="Spooly server URL")
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="Show available and empty filaments")
    list_cmd.add_argument("--search", "-s", default="", help="Filter by name, brand or material")

    show_cmd = sub.add_parser("show", help="Show every field of one spool")
    show_cmd.add_argument("id", type=int)

    add_cmd = sub.add_parser("add", help="Add a new spool")
    add_cmd.add_argument("name")
    add_cmd.add_argument("--brand", default="")
    add_cmd.add_argument("--material", default="")
    add_cmd.add_argument("--color", default=FormDraft.color)
    add_cmd.add_argument("--notes", default="")
    add_cmd.add_argument("--copies", type=int, default=1)
    add_cmd.add_argument("--start-mass", type=float, default=FormDraft.startMass)

    use_cmd = sub.add_parser("use", help="Record grams used from a spool")
    use_cmd.add_argument("id", type=int)
    use_cmd.add_argument("grams")

    edit_cmd = sub.add_parser("edit", help="Change one field of a spool")
    edit_cmd.add_argument("id", type=int)
    edit_cmd.add_argument("field", choices=TEXT_FIELDS + MASS_FIELDS)
    edit_cmd.add_argument("value")

    delete_cmd = sub.add_parser("delete", help="Delete a spool")
    delete_cmd.add_argument("id", type=int)

    import_cmd = sub.add_parser("import", help="Replace all spools from a JSON file")
    import_cmd.add_argument("file")

    export_cmd = sub.add_parser("export", help="Write all spools to a JSON file")
    export_cmd.add_argument("file", nargs="?", default=EXPORT_FILENAME)

    return parser


async def _main(args: argparse.Namespace) -> str:
    async with FilamentClient(args.url) as client:
        return await run_command(args, FilamentInventory(client))


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        print(asyncio.run(_main(args)))
    except FilamentClientError as e:
        print(str(e), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
