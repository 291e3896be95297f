from datetime import date

import pytest
from igreja.core.validators import (
    calculate_age,
    calculate_age_group,
    format_cnpj,
    format_cpf,
    format_phone,
    generate_slug,
    is_reasonable_date,
    is_valid_cnpj,
    is_valid_cpf,
    is_valid_slug,
    normalize_name,
)


class TestDocuments:
    @pytest.mark.parametrize("cpf", ["529.982.247-25", "52998224725", "111.444.777-35"])
    def test_valid_cpf(self, cpf):
        assert is_valid_cpf(cpf)

    @pytest.mark.parametrize("cpf", ["529.982.247-24", "111.111.111-11", "123", ""])
    def test_invalid_cpf(self, cpf):
        assert not is_valid_cpf(cpf)

    def test_format_cpf(self):
        assert format_cpf("52998224725") == "529.982.247-25"
        assert format_cpf("5299") == "529.9"

    def test_valid_cnpj(self):
        assert is_valid_cnpj("11.222.333/0001-81")
        assert format_cnpj("11222333000181") == "11.222.333/0001-81"

    @pytest.mark.parametrize("cnpj", ["11.222.333/0001-82", "00000000000000", "1122233300018"])
    def test_invalid_cnpj(self, cnpj):
        assert not is_valid_cnpj(cnpj)


class TestFormatting:
    def test_mobile_phone(self):
        assert format_phone("11987654321") == "(11) 98765-4321"

    def test_landline_phone(self):
        assert format_phone("(11) 3456-7890") == "(11) 3456-7890"

    def test_name_keeps_prepositions_lowercase(self):
        assert normalize_name("JOÃO DA SILVA") == "João da Silva"
        assert normalize_name("  maria dos santos e souza ") == "Maria dos Santos e Souza"

    def test_name_first_word_always_capitalized(self):
        assert normalize_name("de oliveira") == "De Oliveira"


class TestDates:
    TODAY = date(2026, 6, 15)

    def test_age_before_birthday(self):
        assert calculate_age(date(2000, 6, 16), self.TODAY) == 25

    def test_age_on_birthday(self):
        assert calculate_age(date(2000, 6, 15), self.TODAY) == 26

    @pytest.mark.parametrize(
        "birth,group",
        [
            (date(2024, 1, 1), "Bebê"),
            (date(2018, 1, 1), "Criança"),
            (date(2012, 1, 1), "Adolescente"),
            (date(2000, 1, 1), "Jovem"),
            (date(1980, 1, 1), "Adulto"),
            (date(1950, 1, 1), "Idoso"),
        ],
    )
    def test_age_groups(self, birth, group):
        assert calculate_age_group(birth, self.TODAY) == group

    def test_reasonable_dates(self):
        assert is_reasonable_date(date(1900, 1, 1), self.TODAY)
        assert not is_reasonable_date(date(1899, 12, 31), self.TODAY)
        assert not is_reasonable_date(date(2026, 6, 16), self.TODAY)


class TestSlugs:
    def test_generate_slug_strips_accents(self):
        assert generate_slug("Igreja Batista São João") == "igreja-batista-sao-joao"

    def test_generate_slug_collapses_symbols(self):
        assert generate_slug("  Comunidade -- Vida & Paz! ") == "comunidade-vida-paz"

    @pytest.mark.parametrize("slug", ["acme", "igreja-central", "ibc2"])
    def test_valid_slugs(self, slug):
        assert is_valid_slug(slug)

    @pytest.mark.parametrize("slug", ["", "Acme", "igreja central", "-acme", "acme--x", "acme-"])
    def test_invalid_slugs(self, slug):
        assert not is_valid_slug(slug)
