import unittest

from library_reservations import (
    InvalidArgumentError,
    ItemKind,
    ReservableItem,
    available,
    by_author,
    by_title,
    digital_work,
    newest,
    physical_work,
)


class TestReservableItem(unittest.TestCase):
    def test_physical_work_describes_itself_as_book(self) -> None:
        book = physical_work(1, "Lalka", "Bolesław Prus", "978-83-234-5678-9")

        self.assertEqual(book.kind, ItemKind.PHYSICAL)
        self.assertTrue(book.is_available)
        self.assertEqual(
            book.describe(),
            "[Book] ID: 1, Title: Lalka, Author: Bolesław Prus, ISBN: 978-83-234-5678-9, Available: True",
        )

    def test_digital_work_carries_book_fields_and_format(self) -> None:
        ebook = digital_work(2, "Solaris", "Stanisław Lem", "978-83-456-7890-1", "PDF")

        self.assertTrue(ebook.is_digital)
        self.assertEqual(ebook.author, "Stanisław Lem")
        self.assertIn("[EBook]", ebook.describe())
        self.assertIn("Format: PDF", ebook.describe())

    def test_blank_title_is_rejected(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            physical_work(1, "  ", "Author", "ISBN")

    def test_digital_work_requires_format(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            digital_work(1, "Title", "Author", "ISBN", "")

    def test_physical_work_rejects_format(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            ReservableItem(id=1, title="Title", author="Author", isbn="ISBN", file_format="PDF")

    def test_set_availability_is_idempotent(self) -> None:
        book = physical_work(1, "Title", "Author", "ISBN")

        book.set_availability(False)
        book.set_availability(False)
        self.assertFalse(book.is_available)
        self.assertIn("Available: False", book.describe())

    def test_items_compare_by_identity(self) -> None:
        first = physical_work(1, "Title", "Author", "ISBN")
        second = physical_work(1, "Title", "Author", "ISBN")

        self.assertNotEqual(first, second)
        self.assertEqual(first, first)

    def test_to_dict_includes_format_only_for_digital(self) -> None:
        self.assertNotIn("file_format", physical_work(1, "A", "B", "C").to_dict())
        self.assertEqual(digital_work(2, "A", "B", "C", "EPUB").to_dict()["file_format"], "EPUB")


class TestItemSearch(unittest.TestCase):
    def setUp(self) -> None:
        self.items = [
            physical_work(1, "Pan Tadeusz", "Adam Mickiewicz", "ISBN1"),
            physical_work(2, "Lalka", "Bolesław Prus", "ISBN2"),
            digital_work(3, "Solaris", "Stanisław Lem", "ISBN3", "PDF"),
            digital_work(4, "Cyberiada", "Stanisław Lem", "ISBN4", "EPUB"),
        ]

    def test_available_filters_unavailable_items(self) -> None:
        self.items[1].set_availability(False)

        self.assertEqual([item.id for item in available(self.items)], [1, 3, 4])

    def test_newest_orders_by_descending_id(self) -> None:
        self.assertEqual([item.id for item in newest(self.items, 2)], [4, 3])
        self.assertEqual(newest(self.items, 0), [])

    def test_by_title_is_case_insensitive(self) -> None:
        self.assertEqual([item.id for item in by_title(self.items, "SOLAR")], [3])

    def test_by_title_blank_returns_everything(self) -> None:
        self.assertEqual(len(list(by_title(self.items, " "))), 4)

    def test_by_author_covers_both_variants(self) -> None:
        self.assertEqual([item.id for item in by_author(self.items, "lem")], [3, 4])

    def test_by_author_blank_returns_nothing(self) -> None:
        self.assertEqual(list(by_author(self.items, "")), [])


if __name__ == "__main__":
    unittest.main()
