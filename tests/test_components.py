"""UI 헬퍼 단위 테스트."""

from __future__ import annotations

from src.data.models import Level, LocationSelection
from src.ui.components import format_selection, level_placeholder, level_tooltip, widget_key
from src.ui.dashboard import submissions_to_dataframe


class TestWidgetKey:
    def test_unique_per_level(self) -> None:
        keys = {widget_key(level) for level in Level.ordered()}
        assert len(keys) == 4
        assert widget_key(Level.STATE) == "location_state"


class TestTooltips:
    def test_country_first(self) -> None:
        assert level_tooltip(Level.COUNTRY) == "Please select a country first"

    def test_city_after_district(self) -> None:
        assert level_tooltip(Level.CITY) == "Please select a city after selecting a district"


class TestPlaceholder:
    def test_with_options(self) -> None:
        assert level_placeholder(Level.STATE, True) == "Select state"

    def test_without_options_points_to_parent(self) -> None:
        assert level_placeholder(Level.DISTRICT, False) == "Select a state first"
        assert level_placeholder(Level.COUNTRY, False) == "No countries available"


class TestFormatSelection:
    def test_format(self, sample_selection: LocationSelection) -> None:
        assert format_selection(sample_selection) == (
            "Country: Brazil · State: SP · District: Centro · City: Sao Paulo"
        )

    def test_empty_parts_as_dash(self) -> None:
        assert format_selection(LocationSelection(country="India")) == (
            "Country: India · State: - · District: - · City: -"
        )


class TestSubmissionsToDataframe:
    def test_empty_keeps_columns(self) -> None:
        df = submissions_to_dataframe([])
        assert df.empty
        assert list(df.columns) == ["제출 시각", "Country", "State", "District", "City"]
