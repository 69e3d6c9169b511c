from schelling_explorer.config.constants import (
    DEFAULT_GROUP_COLORS,
    EMPTY_CELL,
    FLUSH_THRESHOLD,
    GRID_HEIGHT,
    GRID_WIDTH,
    GROUP_ID_MASK,
    GROUP_ID_SHIFT,
    MAX_GROUP_ID,
    MAXIMUM_STEPS,
    MOVE_CHANCE,
    PERCENT_EMPTY,
    SEARCH_LIMIT,
    SEARCH_RADIUS,
    SHUFFLE_TIMES,
    UNHAPPY_BIT,
)


def test_grid_dimensions_are_positive_ints() -> None:
    assert isinstance(GRID_WIDTH, int) and GRID_WIDTH > 0
    assert isinstance(GRID_HEIGHT, int) and GRID_HEIGHT > 0


def test_fractions_are_in_unit_interval() -> None:
    assert 0.0 <= PERCENT_EMPTY <= 1.0
    assert 0.0 <= MOVE_CHANCE <= 1.0


def test_search_defaults_are_positive() -> None:
    assert SEARCH_RADIUS >= 1
    assert SEARCH_LIMIT >= 1
    assert SHUFFLE_TIMES >= 1
    assert MAXIMUM_STEPS > 0


def test_empty_cell_never_decodes_to_a_valid_group() -> None:
    assert (EMPTY_CELL >> GROUP_ID_SHIFT) & GROUP_ID_MASK > MAX_GROUP_ID


def test_unhappy_bit_fits_signed_32_bits() -> None:
    assert UNHAPPY_BIT == -(2**31)
    assert (MAX_GROUP_ID << GROUP_ID_SHIFT) < 2**31


def test_flush_threshold_is_positive() -> None:
    assert isinstance(FLUSH_THRESHOLD, int) and FLUSH_THRESHOLD > 0


def test_default_palette_covers_two_groups() -> None:
    assert len(DEFAULT_GROUP_COLORS) == 2
    for happy, unhappy in DEFAULT_GROUP_COLORS:
        assert happy.startswith("#") and len(happy) == 7
        assert unhappy.startswith("#") and len(unhappy) == 7
