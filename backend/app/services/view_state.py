"""Explicit UI state.

Exactly one modal can be open at a time, and the targeted filament travels
with the modal that needs it. Everything here is a plain dataclass, so
`dataclasses.asdict` serializes it.
"""

from dataclasses import asdict, dataclass, field

from backend.app.schemas.filament import DEFAULT_COLOR

DEFAULT_START_MASS = 1000


@dataclass(frozen=True)
class NoModal:
    pass


@dataclass(frozen=True)
class AddModal:
    pass


@dataclass(frozen=True)
class UseModal:
    filament_id: int


@dataclass(frozen=True)
class InfoModal:
    filament_id: int


@dataclass(frozen=True)
class SettingsModal:
    pass


Modal = NoModal | AddModal | UseModal | InfoModal | SettingsModal


@dataclass
class FormDraft:
    """The add-filament form, in wire field names."""

    name: str = ""
    brand: str = ""
    notes: str = ""
    copies: int = 1
    color: str = DEFAULT_COLOR
    material: str = ""
    startMass: float = DEFAULT_START_MASS
    currentMass: float = DEFAULT_START_MASS

    def to_payload(self) -> dict:
        """Body for the create request. A new spool starts full."""
        payload = asdict(self)
        payload["currentMass"] = self.startMass
        return payload


@dataclass
class AppState:
    search: str = ""
    dark_mode: bool = False
    draft: FormDraft = field(default_factory=FormDraft)
    modal: Modal = field(default_factory=NoModal)

    def open(self, modal: Modal) -> None:
        self.modal = modal

    def close_modal(self) -> None:
        self.modal = NoModal()

    def reset_draft(self) -> None:
        self.draft = FormDraft()

    @property
    def targeted_filament_id(self) -> int | None:
        return getattr(self.modal, "filament_id", None)
