import unittest

# Module to test
from report_api.services.sheets import utils


class TestColumnLetter(unittest.TestCase):

    def test_single_letters(self):
        self.assertEqual(utils.column_letter(1), 'A')
        self.assertEqual(utils.column_letter(26), 'Z')

    def test_double_letters(self):
        """Test rollover past Z."""
        self.assertEqual(utils.column_letter(27), 'AA')
        self.assertEqual(utils.column_letter(52), 'AZ')
        self.assertEqual(utils.column_letter(53), 'BA')
        self.assertEqual(utils.column_letter(702), 'ZZ')
        self.assertEqual(utils.column_letter(703), 'AAA')

    def test_labels_are_unique(self):
        labels = [utils.column_letter(n) for n in range(1, 1000)]
        self.assertEqual(len(labels), len(set(labels)))

    def test_rejects_non_positive(self):
        for bad in (0, -3, True, 1.5, "2"):
            with self.assertRaises(ValueError):
                utils.column_letter(bad)  # type: ignore


class TestNormalizeHeader(unittest.TestCase):

    def test_vietnamese_header(self):
        self.assertEqual(utils.normalize_header('Số Bill'), 'so_bill')
        self.assertEqual(utils.normalize_header('Địa chỉ giao hàng'), 'dia_chi_giao_hang')

    def test_collapses_runs_and_trims(self):
        self.assertEqual(utils.normalize_header('  Ngày -- Tạo (VN)  '), 'ngay_tao_vn')
        self.assertEqual(utils.normalize_header('__id__'), 'id')

    def test_lowercases(self):
        self.assertEqual(utils.normalize_header('STT'), 'stt')
        self.assertEqual(utils.normalize_header('Customer Name'), 'customer_name')

    def test_idempotent(self):
        for raw in ('Số Bill', 'Ghi chú!!', 'ÉCOLE  No. 5', '', 'a_b', 'Đơn giá (VNĐ)'):
            once = utils.normalize_header(raw)
            self.assertEqual(utils.normalize_header(once), once)

    def test_none_and_numbers(self):
        self.assertEqual(utils.normalize_header(None), '')
        self.assertEqual(utils.normalize_header(2024), '2024')


class TestRangesAndIdentifiers(unittest.TestCase):

    def test_a1_range_quotes_sheet_name(self):
        self.assertEqual(utils.a1_range('Orders', 'A:A'), "'Orders'!A:A")
        self.assertEqual(utils.a1_range('Đơn hàng 2024', '1:1'), "'Đơn hàng 2024'!1:1")

    def test_a1_range_whole_sheet(self):
        self.assertEqual(utils.a1_range('Orders'), "'Orders'")

    def test_a1_range_numeric_sheet_name(self):
        self.assertEqual(utils.a1_range(2024, 'A:A'), "'2024'!A:A")

    def test_same_identifier_trim_and_case(self):
        self.assertTrue(utils.same_identifier('abc', ' ABC '))
        self.assertTrue(utils.same_identifier(42, '42'))
        self.assertFalse(utils.same_identifier(None, 'abc'))
        self.assertFalse(utils.same_identifier('abc1', 'abc'))


if __name__ == '__main__':
    unittest.main()
