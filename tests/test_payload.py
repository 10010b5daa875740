import unittest

from qris_service.crc import compute_checksum
from qris_service.errors import InvalidAmount, MalformedTemplate
from qris_service.payload import (
    Field,
    compose_dynamic_payload,
    encode_fields,
    normalize_amount,
    parse_fields,
)
from tests.samples import DYNAMIC_TEMPLATE, STATIC_TEMPLATE, static_template, tlv


def _head(template):
    """Everything before the country field once the code is switched to dynamic."""
    return template[:-4].replace('010211', '010212').split('5802ID')[0]


class ParseFieldsTests(unittest.TestCase):
    def test_splits_top_level_fields(self):
        fields, trailer = parse_fields('000201010211' + tlv('59', 'Toko') + '5802ID')
        self.assertEqual(fields, [
            Field('00', '01'),
            Field('01', '11'),
            Field('59', 'Toko'),
            Field('58', 'ID'),
        ])
        self.assertEqual(trailer, '')

    def test_open_checksum_header_is_trailer(self):
        fields, trailer = parse_fields(STATIC_TEMPLATE[:-4])
        self.assertEqual(trailer, '6304')
        self.assertEqual(encode_fields(fields) + trailer, STATIC_TEMPLATE[:-4])

    def test_nested_template_kept_opaque(self):
        fields, _ = parse_fields(STATIC_TEMPLATE[:-4])
        tags = [field.tag for field in fields]
        self.assertIn('26', tags)
        self.assertNotIn('03', tags)

    def test_truncated_field(self):
        with self.assertRaises(MalformedTemplate):
            parse_fields('000201' + '5910Toko')

    def test_non_numeric_length(self):
        with self.assertRaises(MalformedTemplate):
            parse_fields('0002010xID')

    def test_dangling_fragment(self):
        with self.assertRaises(MalformedTemplate):
            parse_fields('00020158')

    def test_value_over_99_characters_cannot_be_encoded(self):
        with self.assertRaises(ValueError):
            Field('59', 'x' * 100).encode()


class NormalizeAmountTests(unittest.TestCase):
    def test_accepted_forms(self):
        self.assertEqual(normalize_amount(15000), '15000')
        self.assertEqual(normalize_amount('15000'), '15000')
        self.assertEqual(normalize_amount(' 15000\n'), '15000')
        self.assertEqual(normalize_amount('0015000'), '15000')
        self.assertEqual(normalize_amount(15000.0), '15000')
        self.assertEqual(normalize_amount('9' * 99), '9' * 99)

    def test_rejected_forms(self):
        for amount in (0, -5, '0', '000', '', '  ', 'abc', '12.50', '-100', '1e3',
                       1.5, float('nan'), True, None, [100], '1' * 100, 10 ** 99, '١٢٣'):
            with self.subTest(amount=repr(amount)[:20]):
                with self.assertRaises(InvalidAmount):
                    normalize_amount(amount)


class ComposeDynamicPayloadTests(unittest.TestCase):
    def test_checksum_round_trip(self):
        for amount in (1, 1000, 15000, '250000', 10 ** 12):
            with self.subTest(amount=amount):
                result = compose_dynamic_payload(STATIC_TEMPLATE, amount)
                self.assertEqual(compute_checksum(result[:-4]), result[-4:])

    def test_switches_to_dynamic_mode(self):
        result = compose_dynamic_payload(STATIC_TEMPLATE, 1000)
        self.assertNotIn('010211', result)
        self.assertEqual(result.count('010212'), 1)

    def test_amount_field_inserted_before_country_field(self):
        result = compose_dynamic_payload(STATIC_TEMPLATE, 15000)
        self.assertTrue(result.startswith(_head(STATIC_TEMPLATE) + '540515000' + '5802ID'))

    def test_length_prefix_boundary(self):
        result = compose_dynamic_payload(STATIC_TEMPLATE, 123456789)
        self.assertIn('5409123456789' + '5802ID', result)
        result = compose_dynamic_payload(STATIC_TEMPLATE, 1234567890)
        self.assertIn('54101234567890' + '5802ID', result)

    def test_maximum_amount_length(self):
        result = compose_dynamic_payload(STATIC_TEMPLATE, '9' * 99)
        self.assertIn('5499' + '9' * 99 + '5802ID', result)

    def test_already_dynamic_template(self):
        result = compose_dynamic_payload(DYNAMIC_TEMPLATE, 1000)
        self.assertEqual(len(result), len(DYNAMIC_TEMPLATE) - 4 + len('54041000') + 4)
        self.assertEqual(result[:-4], _head(DYNAMIC_TEMPLATE) + '54041000' + DYNAMIC_TEMPLATE[
            DYNAMIC_TEMPLATE.index('5802ID'):-4])

    def test_segment_length_invariant(self):
        result = compose_dynamic_payload(STATIC_TEMPLATE, 15000)
        head = _head(STATIC_TEMPLATE)
        tail = STATIC_TEMPLATE[STATIC_TEMPLATE.index('5802ID'):-4]
        self.assertEqual(len(result), len(head) + len('540515000') + len(tail) + 4)

    def test_old_checksum_discarded(self):
        a = compose_dynamic_payload(static_template(checksum='ABCD'), 1000)
        b = compose_dynamic_payload(static_template(checksum='1234'), 1000)
        self.assertEqual(a, b)

    def test_deterministic(self):
        self.assertEqual(
            compose_dynamic_payload(STATIC_TEMPLATE, 5000),
            compose_dynamic_payload(STATIC_TEMPLATE, 5000),
        )

    def test_existing_amount_is_replaced(self):
        priced = static_template(poi='12', amount='500')
        result = compose_dynamic_payload(priced, 1000)
        self.assertNotIn('5403500', result)
        self.assertEqual(result.count('54041000'), 1)

    def test_fixed_fee(self):
        result = compose_dynamic_payload(STATIC_TEMPLATE, 15000, fee=1500)
        self.assertIn('540515000' + '550202' + '56041500' + '5802ID', result)
        self.assertEqual(compute_checksum(result[:-4]), result[-4:])

    def test_tip_prompt_is_kept(self):
        template = static_template(extra=['550201'])
        result = compose_dynamic_payload(template, 1000)
        self.assertIn('550201', result)
        head = _head(template)
        tail = template[template.index('5802ID'):-4]
        self.assertTrue(result.startswith(head + '54041000' + '5802ID'))
        self.assertEqual(len(result), len(head) + len('54041000') + len(tail) + 4)
        self.assertEqual(compute_checksum(result[:-4]), result[-4:])

    def test_percentage_fee_is_kept(self):
        template = static_template(extra=['550203', tlv('57', '5')])
        result = compose_dynamic_payload(template, 1000)
        self.assertIn('550203' + '57015', result)

    def test_fee_replaces_existing_fee_settings(self):
        template = static_template(extra=['550203', tlv('57', '5')])
        result = compose_dynamic_payload(template, 1000, fee=500)
        self.assertNotIn('550203', result)
        self.assertNotIn('57015', result)
        self.assertEqual(result.count('550202'), 1)
        self.assertIn('54041000' + '550202' + '5603500' + '5802ID', result)

    def test_invalid_fee(self):
        with self.assertRaises(InvalidAmount):
            compose_dynamic_payload(STATIC_TEMPLATE, 15000, fee='abc')

    def test_missing_country_field(self):
        with self.assertRaises(MalformedTemplate):
            compose_dynamic_payload(static_template(anchors=0), 1000)

    def test_duplicated_country_field(self):
        with self.assertRaises(MalformedTemplate):
            compose_dynamic_payload(static_template(anchors=2), 1000)

    def test_missing_point_of_initiation(self):
        with self.assertRaises(MalformedTemplate):
            compose_dynamic_payload(static_template(poi=None), 1000)

    def test_unknown_point_of_initiation(self):
        with self.assertRaises(MalformedTemplate):
            compose_dynamic_payload(static_template(poi='13'), 1000)

    def test_template_too_short(self):
        for template in ('', 'ABCD', None):
            with self.subTest(template=template):
                with self.assertRaises(MalformedTemplate):
                    compose_dynamic_payload(template, 1000)

    def test_invalid_amount_rejected_before_template(self):
        with self.assertRaises(InvalidAmount):
            compose_dynamic_payload('garbage', 0)


if __name__ == '__main__':
    unittest.main()
