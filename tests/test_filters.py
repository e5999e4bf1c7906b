import unittest

from slotwatch.filters import has_status_cell, is_denied_room_name, is_room_row


class TestRoomNameDenylist(unittest.TestCase):
    def test_denied_names(self) -> None:
        for name in [
            "",
            "   ",
            "施設",
            "●",
            "×",
            "-",
            "4月",
            "12",
            "本日",
            "前へ",
            "次へ",
            "1ヶ月後",
            "1か月前",
            "1週間",
            "2週間後",
            "7日前",
            "1日後",
            "富山地区",
            "呉西地域",
        ]:
            with self.subTest(name=name):
                self.assertTrue(is_denied_room_name(name))

    def test_room_names_pass(self) -> None:
        for name in ["大アリーナ", "大アリーナ全面", "大会議室A", "第1会議室", "柔道場", "多目的エリア", "キッズエリア"]:
            with self.subTest(name=name):
                self.assertFalse(is_denied_room_name(name))


class TestStatusSniffing(unittest.TestCase):
    def test_has_status_cell(self) -> None:
        self.assertTrue(has_status_cell(["", " ● "]))
        self.assertTrue(has_status_cell(["-"]))
        self.assertFalse(has_status_cell(["不可", "休館・保守"]))
        self.assertFalse(has_status_cell([]))

    def test_is_room_row(self) -> None:
        self.assertTrue(is_room_row("大アリーナ", ["●", "×"]))
        self.assertFalse(is_room_row("施設", ["●", "×"]))
        self.assertFalse(is_room_row("大アリーナ", ["料金", "備考"]))

    def test_area_rooms_are_kept(self) -> None:
        for name in ["多目的エリア", "キッズエリア", "トレーニングルームエリア"]:
            with self.subTest(name=name):
                self.assertTrue(is_room_row(name, ["●", "×"]))


if __name__ == "__main__":
    unittest.main()
