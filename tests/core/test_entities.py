"""Tests for showroom.core.intent.entities.

Tests cover:
- Color extraction and vehicle variant resolution
- Price range extraction (keywords, bounds, ranges, MPG exclusion)
- Body type, category, drivetrain, fuel, MPG and make filters
- Model resolution (aliases, fuzzy matches)
- The combined EntityExtractor
"""

from __future__ import annotations

import pytest

from showroom.core.catalog import CatalogIndex
from showroom.core.intent import (
    EntityExtractor,
    ModelExtractor,
    extract_color,
    extract_filters,
    extract_price_range,
)
from showroom.core.intent.entities import extract_make, extract_min_mpg
from showroom.core.models import Vehicle

# =============================================================================
# Color Extraction Tests
# =============================================================================


class TestExtractColor:
    """Tests for extract_color."""

    def test_canonical_without_vehicle(self) -> None:
        """Test a plain color word without a vehicle."""
        color = extract_color("blue Camry")
        assert color is not None
        assert color.canonical == "blue"
        assert color.variant is None
        assert color.name == "blue"
        assert color.code == "BLU"

    def test_resolves_variant(self, camry: Vehicle) -> None:
        """Test the color resolves to the vehicle's paint option."""
        color = extract_color("blue Camry", camry)
        assert color.variant is not None
        assert color.variant.name == "Blueprint"
        assert color.code == "8X8"

    def test_marketing_name(self, camry: Vehicle) -> None:
        """Test a manufacturer color name is recognized."""
        color = extract_color("the blueprint one", camry)
        assert color.canonical == "blue"
        assert color.synonym == "blueprint"
        assert color.variant.name == "Blueprint"

    def test_synonym_group_fallback(self, accord: Vehicle) -> None:
        """Test a blue request finds a blue paint without "blue" in its name."""
        color = extract_color("navy accord", accord)
        assert color.variant.name == "Still Night Pearl"

    def test_silver(self, accord: Vehicle) -> None:
        """Test silver resolves on the Accord."""
        assert extract_color("silver", accord).variant.name == "Lunar Silver Metallic"

    def test_exact_word_beats_synonym(self, vehicle_factory) -> None:
        """Test the word used in the query wins over a looser synonym."""
        vehicle = vehicle_factory(
            colors=[
                {"name": "Ruby Flare Pearl", "code": "3T3"},
                {"name": "Super White", "code": "040"},
            ]
        )
        assert extract_color("white one", vehicle).variant.name == "Super White"

    def test_vehicle_without_that_color(self, soul: Vehicle) -> None:
        """Test the canonical color survives when no variant matches."""
        color = extract_color("red soul", soul)
        assert color.canonical == "red"
        assert color.variant is None

    def test_no_color(self) -> None:
        """Test text without colors."""
        assert extract_color("hybrid sedan under $30k") is None

    def test_to_dict_with_variant(self, camry: Vehicle) -> None:
        """Test boundary form of a resolved color."""
        data = extract_color("silver camry", camry).to_dict()
        assert data["name"] == "Celestial Silver Metallic"
        assert data["code"] == "1J9"

    def test_idempotent(self, camry: Vehicle) -> None:
        """Test repeated extraction returns equal results."""
        assert extract_color("blue camry", camry) == extract_color("blue camry", camry)


# =============================================================================
# Price Extraction Tests
# =============================================================================


class TestExtractPriceRange:
    """Tests for extract_price_range."""

    @pytest.mark.parametrize(
        "text,expected_min,expected_max",
        [
            ("under $30k", None, 30000),
            ("below 30,000", None, 30000),
            ("less than $28,500", None, 28500),
            ("under 30 thousand", None, 30000),
            ("under $35.5k", None, 35500),
            ("over $40k", 40000, None),
            ("at least 40,000", 40000, None),
            ("$25,000-$35,000", 25000, 35000),
            ("$25k to $35k", 25000, 35000),
            ("30-40k", 30000, 40000),
            ("between $20k and $30k", 20000, 30000),
            ("$35k-$25k", 25000, 35000),
        ],
    )
    def test_numeric(self, text: str, expected_min, expected_max) -> None:
        """Test numeric bounds and ranges."""
        price_range = extract_price_range(text)
        assert price_range.min == expected_min
        assert price_range.max == expected_max

    @pytest.mark.parametrize(
        "text,expected_min,expected_max",
        [
            ("something affordable", None, 30000),
            ("economical commuter", None, 30000),
            ("cheap car", None, 25000),
            ("on a budget", None, 25000),
            ("premium sedan", 40000, None),
            ("luxury suv", 50000, None),
        ],
    )
    def test_keywords(self, text: str, expected_min, expected_max) -> None:
        """Test qualitative price keywords."""
        price_range = extract_price_range(text)
        assert price_range.min == expected_min
        assert price_range.max == expected_max

    def test_number_overrides_keyword(self) -> None:
        """Test an explicit bound replaces the keyword default."""
        assert extract_price_range("affordable, under $35k").max == 35000

    def test_contradicting_keyword_dropped(self) -> None:
        """Test a keyword bound that conflicts with a number is dropped."""
        price_range = extract_price_range("luxury feel under $30k")
        assert price_range.min is None
        assert price_range.max == 30000

    def test_mpg_is_not_a_price(self) -> None:
        """Test "over 30 mpg" does not produce a price bound."""
        assert extract_price_range("at least 35 mpg").is_empty()
        assert extract_price_range("over 30mpg").is_empty()

    def test_small_bare_number_is_not_a_price(self) -> None:
        """Test a small number with no money markers is ignored."""
        assert extract_price_range("under 30").is_empty()

    def test_small_number_range_ignored(self) -> None:
        """Test a range of small numbers without money markers is ignored."""
        assert extract_price_range("seats 5-7").is_empty()

    @pytest.mark.parametrize("text", ["2022-2024 camry", "a 2019 to 2021 rav4"])
    def test_model_years_are_not_prices(self, text: str) -> None:
        """Test a span of model years is not read as a price range."""
        assert extract_price_range(text).is_empty()

    def test_model_year_with_price(self) -> None:
        """Test a model year next to a real price keeps only the price."""
        price = extract_price_range("2023 camry under $30k")
        assert price.min is None
        assert price.max == 30000

    def test_no_price(self) -> None:
        """Test text with no price."""
        assert extract_price_range("blue camry").is_empty()


# =============================================================================
# Filter Extraction Tests
# =============================================================================


class TestExtractFilters:
    """Tests for extract_filters."""

    def test_body_and_category(self) -> None:
        """Test body type and size class."""
        filters = extract_filters("compact SUV")
        assert filters.body_type == "SUV"
        assert filters.category == "Compact"

    def test_plural_body_type(self) -> None:
        """Test plural body types."""
        assert extract_filters("show me sedans").body_type == "Sedan"
        assert extract_filters("pickup trucks").body_type == "Truck"
        assert extract_filters("crossovers").body_type == "SUV"

    @pytest.mark.parametrize(
        "text,drivetrain",
        [
            ("awd", "AWD"),
            ("all-wheel drive", "AWD"),
            ("4x4", "4WD"),
            ("four wheel drive", "4WD"),
            ("something for offroad trips", "4WD"),
            ("front-wheel drive", "FWD"),
            ("RWD coupe", "RWD"),
        ],
    )
    def test_drivetrain(self, text: str, drivetrain: str) -> None:
        """Test drivetrain keywords."""
        assert extract_filters(text).drivetrain == drivetrain

    def test_drivetrain_whole_word_only(self) -> None:
        """Test "awd" inside another word is not a drivetrain."""
        assert extract_filters("a drawdown").drivetrain is None

    @pytest.mark.parametrize(
        "text,fuel,electrified",
        [
            ("plug-in hybrid", "Plug-in Hybrid", True),
            ("phev", "Plug-in Hybrid", True),
            ("hybrid", "Hybrid", True),
            ("hybrids", "Hybrid", True),
            ("electric car", "Electric", True),
            ("an ev", "Electric", True),
            ("gas engine", "Gasoline", False),
        ],
    )
    def test_fuel(self, text: str, fuel: str, electrified: bool) -> None:
        """Test fuel type and electrified flag."""
        filters = extract_filters(text)
        assert filters.fuel_type == fuel
        assert filters.electrified is electrified

    def test_gas_mileage_is_not_fuel(self) -> None:
        """Test "good gas mileage" sets an MPG floor, not a fuel type."""
        filters = extract_filters("good gas mileage")
        assert filters.fuel_type is None
        assert filters.min_mpg == 35

    def test_explicit_mpg(self) -> None:
        """Test an explicit MPG figure."""
        assert extract_min_mpg("at least 40 mpg") == 40
        assert extract_min_mpg("40+ mpg") == 40

    def test_efficient_default(self) -> None:
        """Test efficiency words imply the default MPG floor."""
        assert extract_min_mpg("fuel efficient sedan") == 35
        assert extract_min_mpg("sedan") is None

    @pytest.mark.parametrize(
        "text,make",
        [
            ("toyota suv", "Toyota"),
            ("a chevy", "Chevrolet"),
            ("vw golf", "Volkswagen"),
            ("volkswagon", "Volkswagen"),
            ("HONDA", "Honda"),
        ],
    )
    def test_make(self, text: str, make: str) -> None:
        """Test make aliases."""
        assert extract_make(text) == make

    def test_no_make(self) -> None:
        """Test text without a make."""
        assert extract_make("a blue sedan") is None

    def test_full_query(self) -> None:
        """Test a query with several constraints."""
        filters = extract_filters("affordable hybrid SUVs under $35k")
        assert filters.body_type == "SUV"
        assert filters.fuel_type == "Hybrid"
        assert filters.electrified is True
        assert filters.price_range.max == 35000
        assert filters.price_range.min is None

    def test_color_filter(self) -> None:
        """Test a color word becomes a canonical color filter."""
        assert extract_filters("grey sedan").color == "gray"

    def test_trim_name_is_not_a_color(self) -> None:
        """Test a Platinum trim does not become a white color filter."""
        assert extract_filters("highlander platinum").color is None

    def test_nothing(self) -> None:
        """Test unrelated text yields an empty FilterSet."""
        assert extract_filters("hello there").is_empty()

    def test_idempotent(self) -> None:
        """Test repeated extraction returns equal results."""
        text = "compact awd hybrid under $40k"
        assert extract_filters(text) == extract_filters(text)


# =============================================================================
# Model Extraction Tests
# =============================================================================


class TestModelExtractor:
    """Tests for ModelExtractor."""

    @pytest.fixture
    def models(self, catalog: CatalogIndex) -> ModelExtractor:
        return ModelExtractor(catalog)

    def test_exact_model(self, models: ModelExtractor) -> None:
        """Test an exact model name resolves by fuzzy search."""
        match = models.match("camry")
        assert match.vehicle.id == "camry-le-hybrid-2025"
        assert match.source == "fuzzy"

    @pytest.mark.parametrize(
        "text,vehicle_id",
        [
            ("camery", "camry-le-hybrid-2025"),
            ("camary", "camry-le-hybrid-2025"),
            ("rav 4", "rav4-xle-hybrid-2025"),
            ("rav-4", "rav4-xle-hybrid-2025"),
            ("acord", "accord-sport-hybrid-2025"),
            ("mazda 3", "mazda3-preferred-2025"),
        ],
    )
    def test_aliases(self, models: ModelExtractor, text: str, vehicle_id: str) -> None:
        """Test misspellings and spaced forms resolve through the alias table."""
        match = models.match(text)
        assert match is not None
        assert match.vehicle.id == vehicle_id
        assert match.source == "alias"
        assert match.score == 1.0

    def test_joined_name_without_alias(self, models: ModelExtractor) -> None:
        """Test "rav4" resolves without the alias table."""
        assert models.match("rav4").vehicle.id == "rav4-xle-hybrid-2025"

    def test_make_only_is_not_a_model(self, models: ModelExtractor) -> None:
        """Test a make on its own does not pick a model."""
        assert models.match("honda") is None

    def test_alias_for_model_not_in_catalog(self, models: ModelExtractor) -> None:
        """Test an alias whose model is missing from the catalog is skipped."""
        assert models.match("sequoya") is None

    def test_unknown(self, models: ModelExtractor) -> None:
        """Test unknown vehicles and blank text."""
        assert models.match("ferrari") is None
        assert models.match("  ") is None

    def test_alias_prefers_named_trim(self, vehicle_factory) -> None:
        """Test an alias hit ranks trims by the rest of the text."""
        catalog = CatalogIndex(
            [
                vehicle_factory(id="camry-le", model="Camry", trim="LE"),
                vehicle_factory(id="camry-xse", model="Camry", trim="XSE"),
            ]
        )
        match = ModelExtractor(catalog).match("camery xse")
        assert match.vehicle.id == "camry-xse"
        assert match.vehicle_ids == ["camry-xse", "camry-le"]


# =============================================================================
# EntityExtractor Tests
# =============================================================================


class TestEntityExtractor:
    """Tests for the combined extractor."""

    @pytest.fixture
    def extractor(self, catalog: CatalogIndex) -> EntityExtractor:
        return EntityExtractor(catalog)

    def test_model_pins_make_and_model(self, extractor: EntityExtractor) -> None:
        """Test a resolved model sets make and model filters."""
        entities = extractor.extract("blue camry")
        assert entities.filters.make == "Toyota"
        assert entities.filters.model == "Camry"
        assert entities.vehicle_ids == ["camry-le-hybrid-2025"]

    def test_color_resolved_against_model(self, extractor: EntityExtractor) -> None:
        """Test the color is resolved on the matched vehicle."""
        entities = extractor.extract("blue camry")
        assert entities.color.variant.name == "Blueprint"
        assert entities.filters.color == "blue"

    def test_price_range_exposed(self, extractor: EntityExtractor) -> None:
        """Test the price range is reported alongside the filters."""
        entities = extractor.extract("hybrid under $35k")
        assert entities.price_range.max == 35000
        assert entities.model is None
        assert entities.vehicle_ids == []

    def test_to_dict(self, extractor: EntityExtractor) -> None:
        """Test the boundary form omits empty parts."""
        assert extractor.extract("hello").to_dict() == {}
        data = extractor.extract("silver camry under $35k").to_dict()
        assert data["vehicleIds"] == ["camry-le-hybrid-2025"]
        assert data["priceRange"] == {"max": 35000}
        assert data["color"]["name"] == "Celestial Silver Metallic"
