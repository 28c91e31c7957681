"""
Tests for the serialized number codec and ticket counting.
"""

from decimal import Decimal

import pytest

from packman import serials
from packman.counting import calculate_expected_count, sales_amount
from packman.exceptions import PackError


class TestParse:
    """Tests for serials.parse()."""

    def test_parse_splits_fields(self):
        parsed = serials.parse('000112345670123456789012')

        assert parsed.game_code == '0001'
        assert parsed.pack_number == '1234567'
        assert parsed.serial_segment == '012'
        assert parsed.identifier == '3456789012'

    def test_parse_keeps_leading_zeros(self):
        parsed = serials.parse('000100000010000000000000')

        assert parsed.game_code == '0001'
        assert parsed.pack_number == '0000001'
        assert parsed.serial_segment == '000'

    def test_parts_reassemble_to_code(self):
        code = '123498765432509876543210'
        parsed = serials.parse(code)

        assert parsed.prefix + parsed.identifier == code

    @pytest.mark.parametrize('code', [
        '',
        '00011234567012345678901',     # 23 digits
        '0001123456701234567890123',   # 25 digits
        '00011234567012345678901a',
        ' 000112345670123456789012',
        '000112345670123456789012 ',
        '0001-1234567-012-3456789',
        None,
        112345670123456789012,
    ])
    def test_parse_rejects_malformed(self, code):
        with pytest.raises(PackError) as exc:
            serials.parse(code)

        assert exc.value.code == 'INVALID_FORMAT'
        assert exc.value.message == 'Invalid serial number format. Must be 24 digits.'
        assert exc.value.data == {'value': code}

    def test_unicode_digits_rejected(self):
        """Only ASCII 0-9 count as digits."""
        assert not serials.is_valid('٠٠٠١١٢٣٤٥٦٧٠١٢٣٤٥٦٧٨٩٠١٢')


class TestIsValid:
    """Tests for serials.is_valid()."""

    def test_valid_code(self):
        assert serials.is_valid('000112345670123456789012')

    def test_invalid_code(self):
        assert not serials.is_valid('0001123456701234567890')


class TestSerialHelpers:
    """Tests for 3-digit serial helpers."""

    def test_offset_serial_pads(self):
        assert serials.offset_serial('000', 149) == '149'
        assert serials.offset_serial('005', 4) == '009'

    def test_offset_serial_overflow(self):
        with pytest.raises(PackError) as exc:
            serials.offset_serial('900', 149)

        assert exc.value.code == 'INVALID_SERIAL'

    def test_offset_serial_rejects_malformed(self):
        with pytest.raises(PackError) as exc:
            serials.offset_serial('12', 1)

        assert exc.value.code == 'INVALID_SERIAL'

    def test_serial_in_range(self):
        assert serials.serial_in_range('000', '000', '149')
        assert serials.serial_in_range('149', '000', '149')
        assert not serials.serial_in_range('150', '000', '149')
        assert not serials.serial_in_range('49', '000', '149')

    def test_is_valid_serial(self):
        assert serials.is_valid_serial('007')
        assert not serials.is_valid_serial('7')
        assert not serials.is_valid_serial(7)


class TestCalculateExpectedCount:
    """Tests for calculate_expected_count()."""

    def test_inclusive_count(self):
        assert calculate_expected_count('000', '014') == 15

    def test_same_serial_is_one_ticket(self):
        assert calculate_expected_count('050', '050') == 1

    def test_inverted_range_clamps_to_zero(self):
        assert calculate_expected_count('050', '025') == 0

    def test_full_pack(self):
        assert calculate_expected_count('000', '149') == 150

    def test_sales_amount(self):
        assert sales_amount(15, Decimal('5.00')) == Decimal('75.00')
