import pytest

from sigmosaic.config import DEFAULT_PROFILE, PROFILES, get_profile
from sigmosaic.errors import InvalidInputError
from tests.conftest import make_config


def test_builtin_profiles_are_valid():
    for config in PROFILES.values():
        assert config.validate() is config


def test_standard_profile_is_capped():
    config = get_profile()
    assert DEFAULT_PROFILE == "standard"
    assert config.grid_width == 100
    assert config.tile_size == 40
    assert config.max_output_width == 4000
    assert config.max_output_height == 4000


def test_uncapped_profile_has_no_limits():
    config = get_profile("uncapped")
    assert config.max_output_width is None
    assert config.max_output_height is None


def test_overrides_replace_fields():
    config = get_profile("standard", grid_width=12, visibility=0.25)
    assert config.grid_width == 12
    assert config.visibility == 0.25
    assert config.tile_size == PROFILES["standard"].tile_size


def test_none_overrides_are_ignored():
    assert get_profile("standard", tile_size=None, contrast_gain=None) == PROFILES["standard"]


def test_unknown_profile():
    with pytest.raises(InvalidInputError, match="Unknown profile") as info:
        get_profile("enormous")
    assert info.value.source == "profile"


def test_unknown_override_field():
    with pytest.raises(InvalidInputError, match="Unknown config fields"):
        get_profile("standard", colour=True)


@pytest.mark.parametrize(
    "field, value",
    [
        ("grid_width", 0),
        ("grid_width", -3),
        ("grid_width", True),
        ("tile_size", 0),
        ("tile_size", 2.5),
        ("contrast_gain", -0.1),
        ("contrast_gain", float("nan")),
        ("contrast_gain", float("inf")),
        ("contrast_gain", "5"),
        ("visibility", float("nan")),
        ("visibility", "0.5"),
        ("signature_threshold", float("-inf")),
        ("signature_threshold", None),
        ("visibility", -0.01),
        ("visibility", 1.01),
        ("signature_threshold", 1.5),
        ("max_output_width", 0),
        ("max_output_height", -10),
        ("max_output_width", True),
        ("max_output_height", False),
    ],
)
def test_invalid_values_rejected(field, value):
    with pytest.raises(InvalidInputError) as info:
        make_config(**{field: value}).validate()
    assert info.value.source == field


def test_invalid_input_is_a_value_error():
    with pytest.raises(ValueError):
        make_config(tile_size=0).validate()


def test_boundary_values_accepted():
    make_config(contrast_gain=0.0, visibility=0.0, signature_threshold=0.0).validate()
    make_config(visibility=1.0, signature_threshold=1.0).validate()
