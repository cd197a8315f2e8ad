from typing import Protocol


class SourcePicker(Protocol):
    async def pick_directory(self) -> str | None: ...

    async def pick_file(self, extensions: list[str]) -> str | None: ...


class PresetPicker:
    """Picker whose answer was already chosen by the shell's native dialog.

    ``None`` or an empty string means the dialog was cancelled.
    """

    def __init__(self, path: str | None):
        self._path = path or None

    async def pick_directory(self) -> str | None:
        return self._path

    async def pick_file(self, extensions: list[str]) -> str | None:
        if self._path is None:
            return None
        if extensions and not any(self._path.lower().endswith(f".{ext.lower()}") for ext in extensions):
            return None
        return self._path
