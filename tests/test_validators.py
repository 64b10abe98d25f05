"""
Tests for input validation utilities.
"""

import pytest

from app.utils.validators import (
    ValidationError,
    clean_coordinates,
    clean_name,
    clean_text,
    clean_text_fields,
    validate_email,
    validate_international_phone,
    validate_phone,
)


class TestValidateEmail:
    """Tests for email validation."""

    def test_valid_email(self):
        assert validate_email('contact@ressourcerie.fr') is True
        assert validate_email('user.name+tag@example.co.uk') is True

    def test_invalid_email(self):
        assert validate_email('') is False
        assert validate_email(None) is False
        assert validate_email('invalid') is False
        assert validate_email('missing@domain') is False
        assert validate_email('spaces in@email.com') is False


class TestValidatePhone:
    """Tests for French phone validation."""

    def test_valid_french_phones(self):
        assert validate_phone('0123456789') is True
        assert validate_phone('01 23 45 67 89') is True
        assert validate_phone('01.23.45.67.89') is True
        assert validate_phone('+33 1 23 45 67 89') is True
        assert validate_phone('0033123456789') is True

    def test_invalid_phones(self):
        assert validate_phone('') is False
        assert validate_phone(None) is False
        assert validate_phone('0023456789') is False  # 0 after the trunk prefix
        assert validate_phone('012345678') is False
        assert validate_phone('+34612345678') is False


class TestValidateInternationalPhone:
    def test_valid(self):
        assert validate_international_phone('+32 2 123 45 67') is True
        assert validate_international_phone('+41 22 123 45 67') is True
        assert validate_international_phone('+34612345678') is True

    def test_invalid(self):
        assert validate_international_phone(None) is False
        assert validate_international_phone('0123456789') is False  # no country code
        assert validate_international_phone('+0 12 34 56 78') is False
        assert validate_international_phone('+32 12') is False
        assert validate_international_phone('+1 2345 6789 0123 4567') is False


class TestCleanName:
    def test_trims(self):
        assert clean_name('  Repair Café  ') == 'Repair Café'

    @pytest.mark.parametrize('name', [None, '', 'AB', '  AB  '])
    def test_too_short(self, name):
        with pytest.raises(ValidationError, match='3 caractères'):
            clean_name(name)


class TestCleanCoordinates:
    def test_valid(self):
        assert clean_coordinates(48.8566, 2.3522) == (48.8566, 2.3522)
        assert clean_coordinates(-90, 180) == (-90.0, 180.0)

    def test_nan(self):
        with pytest.raises(ValidationError, match='invalides'):
            clean_coordinates(float('nan'), 2.0)

    def test_not_a_number(self):
        with pytest.raises(ValidationError, match='invalides'):
            clean_coordinates('abc', 2.0)

    @pytest.mark.parametrize('lat,lng', [(91, 0), (-91, 0), (0, 181), (0, -181)])
    def test_out_of_range(self, lat, lng):
        with pytest.raises(ValidationError, match='hors limites'):
            clean_coordinates(lat, lng)


class TestCleanText:
    def test_blank_becomes_none(self):
        assert clean_text('   ') is None
        assert clean_text(None) is None
        assert clean_text(' x ') == 'x'

    def test_only_present_fields(self):
        cleaned = clean_text_fields({'address': ' 1 rue A ', 'website': ''}, ['address', 'website', 'email'])
        assert cleaned == {'address': '1 rue A', 'website': None}

    def test_accepts_french_and_international_phones(self):
        assert clean_text_fields({'phone': '01 23 45 67 89'}, ['phone']) == {'phone': '01 23 45 67 89'}
        assert clean_text_fields({'phone': '+32 2 123 45 67'}, ['phone']) == {'phone': '+32 2 123 45 67'}

    def test_rejects_bad_phone(self):
        with pytest.raises(ValidationError, match='téléphone'):
            clean_text_fields({'phone': 'call me'}, ['phone'])

    def test_rejects_bad_email(self):
        with pytest.raises(ValidationError):
            clean_text_fields({'email': 'nope'}, ['email'])
