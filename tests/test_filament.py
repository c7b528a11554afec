"""Tests for the Filament model."""

from datetime import datetime

import pytest

from print_cost.models import Filament
from print_cost.profiles import FALLBACK_DENSITY

NOW = datetime(2024, 5, 1, 12, 0, 0)


class TestFilamentPricing:
    """Test filament pricing."""

    def test_price_per_gram(self):
        """Test spool price divided by spool weight."""
        filament = Filament(spool_price=25.0, spool_weight=1000.0)
        assert filament.price_per_gram() == pytest.approx(0.025)
        assert filament.cost(20.0) == pytest.approx(0.5)

    def test_zero_spool_weight(self):
        """Test a zero spool weight gives a zero price."""
        assert Filament(spool_weight=0.0).price_per_gram() == 0.0


class TestFilamentGeometry:
    """Test length and weight conversion."""

    def test_length_to_weight(self):
        """Test one meter of 1.75 mm PLA."""
        pla = Filament(diameter=1.75, density=1.24)
        assert pla.length_to_weight(1000.0) == pytest.approx(2.9826, rel=1e-4)

    @pytest.mark.parametrize("grams", [1.0, 250.0, 1000.0])
    def test_weight_to_length_inverse(self, grams):
        """Test the conversions are exact inverses."""
        petg = Filament(material="PETG", diameter=2.85)
        assert petg.length_to_weight(petg.weight_to_length(grams)) == pytest.approx(grams)

    def test_length_per_spool(self):
        """Test a 1 kg PLA spool holds roughly 335 m."""
        assert Filament(spool_weight=1000.0).length_per_spool_m() == pytest.approx(335.3, abs=0.1)


class TestFilamentMaterial:
    """Test material defaults and naming."""

    def test_material_defaults(self):
        """Test density and temperatures come from the material table."""
        petg = Filament(material="PETG")
        assert petg.density == 1.27
        assert petg.print_temp.min == 220
        assert petg.bed_temp.max == 85

    def test_explicit_density_kept(self):
        """Test an explicit density overrides the table."""
        assert Filament(material="PETG", density=1.3).density == 1.3

    def test_unknown_material_fallback(self):
        """Test unknown materials use the fallback density."""
        assert Filament(material="Mystery").density == FALLBACK_DENSITY

    def test_with_material(self):
        """Test switching material re-applies table values."""
        abs_filament = Filament(material="PLA").with_material("ABS", NOW)
        assert abs_filament.material == "ABS"
        assert abs_filament.density == 1.04
        assert abs_filament.updated_at == NOW

    def test_with_unknown_material_keeps_density(self):
        """Test switching to an unknown material keeps the density."""
        custom = Filament(material="PETG").with_material("Mystery", NOW)
        assert custom.density == 1.27

    @pytest.mark.parametrize(
        "material,name,expected",
        [
            ("Carbon Fiber", "", True),
            ("PLA", "Wood-Fill Oak", True),
            ("PLA", "Basic", False),
        ],
    )
    def test_is_abrasive(self, material, name, expected):
        """Test abrasive detection by material and name."""
        assert Filament(material=material, name=name).is_abrasive() is expected

    def test_display_names(self):
        """Test display and short names."""
        galaxy = Filament(name="Galaxy", manufacturer="Prusament")
        assert galaxy.display_name() == "Prusament Galaxy"
        assert Filament(material="PLA", color="Red").display_name() == "PLA - Red"
        assert Filament(material="PLA", color="Red").short_name() == "PLA Red"
        assert Filament(material="PETG").short_name() == "PETG"


class TestFilamentStock:
    """Test stock keeping."""

    def test_use_filament_floors_at_zero(self):
        """Test stock never goes negative."""
        filament = Filament(in_stock_grams=50.0)
        assert filament.use_filament(20.0, NOW).in_stock_grams == pytest.approx(30.0)
        assert filament.use_filament(80.0, NOW).in_stock_grams == 0.0

    def test_add_spools(self):
        """Test adding full spools."""
        filament = Filament(spool_weight=750.0).add_spools(2, NOW)
        assert filament.spools_in_stock == 2
        assert filament.in_stock_grams == pytest.approx(1500.0)

    def test_record_round_trip(self):
        """Test converting to a record and back."""
        original = Filament(
            id="f1", name="Basic", material="PETG", color="Black", spool_price=22.0, created_at=NOW
        )
        record = original.to_record()
        assert record["print_temp"] == {"min": 220, "max": 250}
        assert Filament.from_record(record) == original

    def test_from_sparse_record(self):
        """Test absent fields fall back to defaults."""
        filament = Filament.from_record({"material": "ABS"})
        assert filament.density == 1.04
        assert filament.diameter == 1.75
        assert filament.spool_weight == 1000.0
