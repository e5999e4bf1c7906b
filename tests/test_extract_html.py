import unittest

from slotwatch.model import AvailabilityStatus as S
from slotwatch.parse import extract_raw_rows, parse_availability_html


PAGE = """
<html><body>
<h3>富山県総合体育センター 2026年11月3日</h3>
<table>
  <tr><td>前へ</td><td>本日</td><td>次へ</td></tr>
  <tr><td>1ヶ月前</td><td>1ヶ月後</td></tr>
</table>
<table>
  <tr><th>施設</th><th>9</th><th>10</th></tr>
  <tr><td>大アリーナ全面</td><td>●</td><td>×</td><td>×</td><td> ● </td></tr>
  <tr><td>大アリーナ全面</td><td>×</td><td>×</td><td>●</td><td>-</td></tr>
  <tr><td>施設</td><td>●</td><td>×</td><td>-</td><td>-</td></tr>
  <tr><td>備考</td><td>利用は9時から</td></tr>
</table>
</body></html>
"""


class TestExtractRawRows(unittest.TestCase):
    def test_rows_and_header_hours(self) -> None:
        rows = extract_raw_rows(PAGE)
        names = [r.room_name for r in rows]

        self.assertIn("前へ", names)
        self.assertEqual(names.count("大アリーナ全面"), 2)

        arena = [r for r in rows if r.room_name == "大アリーナ全面"][0]
        self.assertEqual(arena.cells, ("●", "×", "×", "●"))
        self.assertEqual(arena.header_hours, ("9", "10"))

    def test_table_without_hours_has_empty_header(self) -> None:
        rows = extract_raw_rows(PAGE)
        nav = [r for r in rows if r.room_name == "前へ"][0]
        self.assertEqual(nav.header_hours, ())

    def test_parse_page(self) -> None:
        rooms = parse_availability_html(PAGE)

        self.assertEqual([r.room_name for r in rooms], ["大アリーナ全面", "大アリーナ全面"])
        first = rooms[0]
        self.assertEqual([s.time for s in first.time_slots], ["9:00", "9:30", "10:00", "10:30"])
        self.assertIs(first.time_slots[3].status, S.AVAILABLE)

    def test_empty_page(self) -> None:
        self.assertEqual(extract_raw_rows(""), [])
        self.assertEqual(parse_availability_html("<p>メンテナンス中</p>"), [])


if __name__ == "__main__":
    unittest.main()
