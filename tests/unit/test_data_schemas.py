"""
Tests for data schemas (Household, BuildingCentroid and VillageTarget).
"""
import pytest
from pydantic import ValidationError
from field_coverage.data.schemas import Household, BuildingCentroid, VillageTarget


class TestHousehold:
    """Tests for Household schema."""

    def test_valid_household(self):
        """Test valid household creation."""
        household = Household(
            lat=-6.8235,
            lon=37.6612,
            enumerator_id=' enum-07 ',
            enumerator_name='Asha M.',
            data={'hh_size': 5}
        )

        assert household.lat == -6.8235
        assert household.enumerator_id == 'enum-07'  # Whitespace stripped
        assert household.data['hh_size'] == 5

    def test_minimal_household(self):
        """Only coordinates are required."""
        household = Household(lat=-6.8, lon=37.6)

        assert household.enumerator_id is None
        assert household.data == {}

    def test_latitude_out_of_range(self):
        with pytest.raises(ValidationError):
            Household(lat=95.0, lon=37.6)

    def test_longitude_out_of_range(self):
        with pytest.raises(ValidationError):
            Household(lat=-6.8, lon=-181.0)

    def test_coordinates_required(self):
        with pytest.raises(ValidationError):
            Household(lat=-6.8)


class TestBuildingCentroid:
    """Tests for BuildingCentroid schema."""

    def test_valid_building(self):
        building = BuildingCentroid(id=4120331, lat=-6.8237, lon=37.6609, tags={'building': 'house'})

        assert building.id == 4120331
        assert building.tags['building'] == 'house'

    def test_tags_optional(self):
        assert BuildingCentroid(id=1, lat=0.5, lon=0.5).tags is None


class TestVillageTarget:
    """Tests for VillageTarget schema."""

    def test_completion_percentage(self):
        village = VillageTarget(district='Kilosa', village='Ulaya', expected=120, actual=90)

        assert village.completion_percentage == 75
        assert village.remaining_samples == 30
        assert village.key == 'Kilosa-Ulaya'

    def test_completion_capped(self):
        """Over-achieving villages report 100%."""
        village = VillageTarget(district='Kilosa', village='Ulaya', expected=40, actual=55)

        assert village.completion_percentage == 100
        assert village.remaining_samples == 0

    def test_zero_target(self):
        """No target means 0% rather than a division error."""
        village = VillageTarget(district='Kilosa', village='Ulaya', expected=0, actual=3)

        assert village.completion_percentage == 0

    def test_completion_rounds_half_up(self):
        """1 of 8 is 12.5%, reported as 13."""
        village = VillageTarget(district='Kilosa', village='Ulaya', expected=8, actual=1)

        assert village.completion_percentage == 13

    def test_negative_target_rejected(self):
        with pytest.raises(ValidationError):
            VillageTarget(district='Kilosa', village='Ulaya', expected=-1)

    def test_names_required(self):
        with pytest.raises(ValidationError):
            VillageTarget(district='', village='Ulaya', expected=10)

    def test_households_parsed(self):
        """Household dicts are validated into Household models."""
        village = VillageTarget(
            district='Kilosa',
            village='Ulaya',
            expected=10,
            households=[{'lat': -6.8, 'lon': 37.6}],
        )

        assert isinstance(village.households[0], Household)
