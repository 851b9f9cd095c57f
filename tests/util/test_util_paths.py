import unittest

from gdrivexfer.util import paths


class TestUtilPaths(unittest.TestCase):
    def test_join_uses_exactly_one_separator(self) -> None:
        self.assertEqual(paths.join("/a", "b.txt"), "/a/b.txt")
        self.assertEqual(paths.join("/a/", "/b.txt"), "/a/b.txt")
        self.assertEqual(paths.join("a//b///", "c"), "/a/b/c")
        self.assertEqual(paths.join("/", "c"), "/c")
        self.assertEqual(paths.join("", "c"), "/c")

    def test_join_rejects_empty_leaf(self) -> None:
        with self.assertRaises(ValueError):
            paths.join("/a", "")
        with self.assertRaises(ValueError):
            paths.join("/a", "//")

    def test_leaf_name(self) -> None:
        self.assertEqual(paths.leaf_name("/test-123"), "test-123")
        self.assertEqual(paths.leaf_name("test-123"), "test-123")
        self.assertEqual(paths.leaf_name("/a/b/c.txt/"), "c.txt")
        self.assertEqual(paths.leaf_name("/"), "")

    def test_split_normalize_parent(self) -> None:
        self.assertEqual(paths.split("//a/b//c/"), ["a", "b", "c"])
        self.assertEqual(paths.normalize("a//b/"), "/a/b")
        self.assertEqual(paths.normalize(""), "/")
        self.assertEqual(paths.parent("/a/b/c"), "/a/b")
        self.assertEqual(paths.parent("/a"), "/")


if __name__ == "__main__":
    unittest.main()
