"""romjak error kinds."""
from __future__ import annotations


class RomjakError(RuntimeError):
    """Base class for every failure that aborts a run."""


class InvalidConfiguration(RomjakError, ValueError):
    """A configuration value violates a limit. Raised before any file I/O."""


class RomIoError(RomjakError):
    """The input or one of the outputs could not be opened, read or written."""

    def __init__(
        self,
        message: str,
        *,
        path=None,
        slot: tuple[int, int] | None = None,
        offset: int | None = None,
    ):
        ctx = []
        if path is not None:
            ctx.append(f"path={path}")
        if slot is not None:
            ctx.append(f"bank={slot[0]} rom={slot[1]}")
        if offset is not None:
            ctx.append(f"offset=0x{offset:08x}")
        super().__init__(f"{message} ({', '.join(ctx)})" if ctx else message)
        self.path = path
        self.slot = slot
        self.offset = offset


class TruncatedRead(RomIoError):
    """The input returned fewer bytes than its known size guarantees."""


class TruncatedWrite(RomIoError):
    """An output accepted fewer bytes than one stride."""
