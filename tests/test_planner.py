import itertools
import warnings

import pytest

from romjak_core.errors import InvalidConfiguration
from romjak_split.planner import Configuration, plan


def test_defaults_fill_width_banks_and_window():
    cfg = Configuration.create(num_roms=2, rom_size_bytes=4)
    assert cfg.rom_width_bits == 8
    assert cfg.num_banks == 1
    assert cfg.pad_up_to_size == 8


def test_geometry_exact_values():
    g = plan(Configuration.create(num_roms=8, rom_size_bytes=1024, rom_width_bits=16, num_banks=2))
    assert g.stride_bytes == 2
    assert g.roms_per_bank == 4
    assert g.bank_size_bytes == 4096
    assert g.total_size_bytes == 8192
    assert g.row_bytes == 8
    # Advisory only: ROM size over the default window rounds down to zero.
    assert g.repeat_count == 0
    assert g.bank_ranges == [(0x0000, 0x0FFF), (0x1000, 0x1FFF)]


def test_repeat_count_with_small_window():
    g = plan(Configuration.create(num_roms=2, rom_size_bytes=1024, pad_up_to_size=256))
    assert g.repeat_count == 4


def test_two_banks_of_two():
    g = plan(Configuration.create(num_roms=4, rom_size_bytes=16, num_banks=2))
    assert g.roms_per_bank == 2
    assert g.bank_size_bytes == 32
    assert list(g.slots()) == [(0, 0), (0, 1), (1, 0), (1, 1)]


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(num_roms=5, rom_size_bytes=16, num_banks=2),  # not divisible
        dict(num_roms=2, rom_size_bytes=16, rom_width_bits=12),  # not byte aligned
        dict(num_roms=2, rom_size_bytes=16, rom_width_bits=40),  # too wide
        dict(num_roms=5, rom_size_bytes=16, num_banks=5),  # too many banks
        dict(num_roms=32, rom_size_bytes=16),  # too many ROMs
        dict(num_roms=0, rom_size_bytes=16),
        dict(num_roms=2, rom_size_bytes=0),
        dict(num_roms=2, rom_size_bytes=16, pad_up_to_size=0),
        dict(num_roms=2, rom_size_bytes=3, rom_width_bits=16),  # image not whole strides
    ],
)
def test_invalid_configurations_rejected(kwargs):
    with pytest.raises(InvalidConfiguration):
        plan(Configuration.create(**kwargs))


def test_invalid_configuration_is_a_value_error():
    with pytest.raises(ValueError, match="multiple of 8"):
        plan(Configuration.create(num_roms=2, rom_size_bytes=16, rom_width_bits=12))


def test_limits_are_inclusive():
    g = plan(Configuration.create(num_roms=16, rom_size_bytes=8, rom_width_bits=32, num_banks=4))
    assert g.roms_per_bank == 4
    assert g.stride_bytes == 4


def test_plain_constructor_defaults_window_to_total_size():
    cfg = Configuration(num_roms=2, rom_size_bytes=4)
    assert cfg.pad_up_to_size == 8
    assert plan(cfg).pad_up_to_size == 8
    assert cfg == Configuration.create(num_roms=2, rom_size_bytes=4)


def test_planning_emits_no_warnings():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        plan(Configuration.create(num_roms=2, rom_size_bytes=8, rom_width_bits=16, pad_up_to_size=5))


def test_window_is_not_constrained_by_rom_size():
    g = plan(Configuration.create(num_roms=2, rom_size_bytes=16, pad_up_to_size=6))
    assert g.pad_up_to_size == 6


@pytest.mark.parametrize(
    "num_roms,num_banks,width,rom_size",
    [
        (n, b, w, s)
        for n, b, w, s in itertools.product([1, 2, 4, 8, 12, 16], [1, 2, 4], [8, 16, 24, 32], [12, 48])
        if n % b == 0
    ],
)
def test_sizes_add_up(num_roms, num_banks, width, rom_size):
    g = plan(Configuration.create(num_roms=num_roms, rom_size_bytes=rom_size, rom_width_bits=width, num_banks=num_banks))
    assert g.bank_size_bytes * g.num_banks == g.total_size_bytes
    assert sum(rom_size for _ in g.slots()) == g.total_size_bytes == rom_size * num_roms
    # Row count times stride lands exactly on the image size.
    assert (g.bank_size_bytes // g.row_bytes) * g.stride_bytes == rom_size
