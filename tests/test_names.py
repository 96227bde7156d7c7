from romjak_core.names import default_base, name_for, slot_names


def test_single_bank_omits_bank_index():
    assert name_for("fw", 0, 3, 1) == "fw.3"


def test_multi_bank_carries_both_indices():
    assert name_for("out/fw", 2, 1, 4) == "out/fw.2.1"


def test_slot_names_are_distinct():
    for banks, per_bank in [(1, 16), (2, 8), (4, 4)]:
        names = slot_names("fw", banks, per_bank)
        assert len(names) == banks
        assert all(len(bank) == per_bank for bank in names)
        flat = [n for bank in names for n in bank]
        assert len(set(flat)) == banks * per_bank


def test_default_base_strips_extension():
    assert default_base("build/firmware.bin") == "build/firmware"
    assert default_base("build/firmware") == "build/firmware"
