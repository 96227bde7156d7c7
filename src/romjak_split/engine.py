from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Sequence
from warnings import warn

from romjak_core.errors import RomIoError, TruncatedRead, TruncatedWrite
from romjak_core.protocol import PAD_BYTE

from .planner import Geometry


class EngineState(Enum):
    PLANNED = "planned"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


def _measure(source: BinaryIO) -> int:
    """Size of a seekable stream; leaves it rewound."""
    try:
        size = source.seek(0, os.SEEK_END)
        source.seek(0)
    except OSError as e:
        raise RomIoError(f"Couldn't size the input: {e}") from e
    return int(size)


class InterleaveEngine:
    """Interleaver: one linear input in, one image per (bank, rom) slot out.

    - The logical space is walked bank by bank, row by row, ROM by ROM.
    - Each step moves one stride from the input to one slot.
    - The input is rewound whenever the absolute position enters a new
      padding window; past the end of the input a stride is pure padding.

    An engine runs once. Its state goes PLANNED -> RUNNING -> COMPLETED or
    FAILED. Partial images from a failed run are left on disk.
    """

    def __init__(self, geometry: Geometry, names: Sequence[Sequence[str]] | None = None):
        self.geometry = geometry
        self.names = [list(bank) for bank in names] if names is not None else None
        self.state = EngineState.PLANNED
        self.stats = {
            "rewinds": 0,
            "strides_read": 0,
            "strides_padded": 0,
            "bytes_written": 0,
        }

        if self.names is not None:
            self._check_shape(self.names, "names")

    def _check_shape(self, table: Sequence[Sequence], what: str) -> None:
        g = self.geometry
        if len(table) != g.num_banks or any(len(bank) != g.roms_per_bank for bank in table):
            raise ValueError(
                f"{what} must be {g.num_banks} bank(s) of {g.roms_per_bank} ROM(s) each"
            )

    @contextmanager
    def _running(self):
        if self.state is not EngineState.PLANNED:
            raise RuntimeError(f"Engine is {self.state.value}; create a new engine for another run")
        self.state = EngineState.RUNNING
        try:
            yield
        except BaseException:
            self.state = EngineState.FAILED
            raise
        self.state = EngineState.COMPLETED

    def get_stats(self) -> dict:
        return dict(self.stats)

    def copy(self, source: BinaryIO, sinks: Sequence[Sequence[BinaryIO]]) -> dict:
        """Interleave an already open input into already open sinks.

        ``sinks`` is indexed ``[bank][rom]``. Nothing is opened or closed here.
        """
        with self._running():
            self._check_shape(sinks, "sinks")
            self._copy(source, sinks)
        return self.get_stats()

    def run(self, input_path: Path | str) -> dict:
        """Open the input and every output, then interleave.

        Outputs are truncated and created; missing parent directories are made.
        Every handle is closed on the way out, including on failure.
        """
        if self.names is None:
            raise ValueError("InterleaveEngine.run() needs output names")

        with self._running():
            self._refuse_input_overwrite(input_path)
            try:
                with ExitStack() as stack:
                    try:
                        source = stack.enter_context(open(input_path, "rb"))
                    except OSError as e:
                        raise RomIoError(f"Couldn't open the input file: {e.strerror}", path=input_path) from e

                    sinks: list[list[BinaryIO]] = []
                    for b, bank_names in enumerate(self.names):
                        row = []
                        for r, name in enumerate(bank_names):
                            out = Path(name)
                            try:
                                out.parent.mkdir(parents=True, exist_ok=True)
                                row.append(stack.enter_context(open(out, "wb")))
                            except OSError as e:
                                raise RomIoError(
                                    f"Couldn't open one of the outputs for writing: {e.strerror}",
                                    path=out,
                                    slot=(b, r),
                                ) from e
                        sinks.append(row)

                    self._copy(source, sinks)
            except OSError as e:
                # Buffered data is flushed on close.
                raise RomIoError(f"Couldn't finish writing the outputs: {e}") from e

        return self.get_stats()

    def _refuse_input_overwrite(self, input_path: Path | str) -> None:
        """Fail before any file is opened if an output name is the input itself."""
        target = Path(input_path).resolve()
        for b, bank_names in enumerate(self.names):
            for r, name in enumerate(bank_names):
                if Path(name).resolve() == target:
                    raise RomIoError(
                        "Output would overwrite the input; choose a different base name",
                        path=name,
                        slot=(b, r),
                    )

    def _copy(self, source: BinaryIO, sinks: Sequence[Sequence[BinaryIO]]) -> None:
        g = self.geometry
        stride = g.stride_bytes
        window = g.pad_up_to_size
        input_size = _measure(source)

        if input_size == 0:
            warn("Input is empty; every image will be pure padding")
        elif input_size > window:
            warn(f"Input is {input_size} bytes; only the first {window} bytes fit the padding window")
        if window % stride != 0:
            warn(
                f"Padding window {window} is not a multiple of the {stride} byte stride; "
                f"the input is only rewound where a stride lands exactly on a window boundary"
            )

        # Input offset of the next read, tracked here so a short read can be
        # told apart from a legitimate end of input.
        cursor = 0

        for b in range(g.num_banks):
            bank_base = b * g.bank_size_bytes
            for pos_bank in range(0, g.bank_size_bytes, g.row_bytes):
                for r in range(g.roms_per_bank):
                    pos_abs = bank_base + pos_bank + r * stride
                    pos_repeat = pos_abs % window

                    if pos_repeat == 0:
                        self._rewind(source, pos_abs)
                        cursor = 0

                    data = bytearray([PAD_BYTE]) * stride
                    if pos_repeat < input_size:
                        chunk = self._read(source, stride, (b, r), pos_abs)
                        expected = min(stride, max(0, input_size - cursor))
                        if len(chunk) < expected:
                            raise TruncatedRead(
                                f"Input ended early: wanted {expected} bytes at input offset {cursor}, got {len(chunk)}",
                                slot=(b, r),
                                offset=pos_abs,
                            )
                        data[: len(chunk)] = chunk
                        cursor += len(chunk)
                        if len(chunk) == stride:
                            self.stats["strides_read"] += 1
                        else:
                            self.stats["strides_padded"] += 1
                    else:
                        self.stats["strides_padded"] += 1

                    self._write(sinks[b][r], bytes(data), (b, r), pos_abs)

    def _rewind(self, source: BinaryIO, pos_abs: int) -> None:
        try:
            source.seek(0)
        except OSError as e:
            raise RomIoError(f"Couldn't rewind the input: {e}", offset=pos_abs) from e
        self.stats["rewinds"] += 1

    def _read(self, source: BinaryIO, n: int, slot: tuple[int, int], pos_abs: int) -> bytes:
        try:
            return source.read(n) or b""
        except OSError as e:
            raise RomIoError(f"Couldn't read the input: {e}", slot=slot, offset=pos_abs) from e

    def _write(self, sink: BinaryIO, data: bytes, slot: tuple[int, int], pos_abs: int) -> None:
        try:
            written = sink.write(data)
        except OSError as e:
            raise RomIoError(f"Couldn't write an output: {e}", slot=slot, offset=pos_abs) from e
        if written != len(data):
            raise TruncatedWrite(
                f"Short write: {written} of {len(data)} bytes committed",
                slot=slot,
                offset=pos_abs,
            )
        self.stats["bytes_written"] += len(data)


def interleave(geometry: Geometry, source: BinaryIO, sinks: Sequence[Sequence[BinaryIO]]) -> dict:
    """One-shot interleave over open streams. Returns the run statistics."""
    return InterleaveEngine(geometry).copy(source, sinks)
