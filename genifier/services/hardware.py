from dataclasses import dataclass


@dataclass
class HardwareAccelFlag:
    """Hardware-acceleration flag with a tentative value awaiting confirmation.

    ``value`` is what the user sees: the tentative value while a toggle is in
    flight, otherwise the last backend-confirmed value.
    """

    confirmed: bool = False
    tentative: bool | None = None

    @property
    def value(self) -> bool:
        return self.confirmed if self.tentative is None else self.tentative

    @property
    def pending(self) -> bool:
        return self.tentative is not None

    def propose(self) -> bool:
        if self.pending:
            raise RuntimeError("a hardware toggle is already awaiting confirmation")
        self.tentative = not self.confirmed
        return self.tentative

    def confirm(self) -> None:
        if self.tentative is not None:
            self.confirmed = self.tentative
        self.tentative = None

    def rollback(self) -> None:
        self.tentative = None
