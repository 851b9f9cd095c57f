import unittest

from gdrivexfer.transfer import ChunkRange, Strategy, plan

KB = 1024


class TestTransferDecider(unittest.TestCase):
    def test_size_at_limit_is_direct(self) -> None:
        p = plan(4 * KB, limit=4 * KB, chunk_size=KB)
        self.assertIs(p.strategy, Strategy.DIRECT)
        self.assertEqual(list(p.chunks()), [ChunkRange(0, 4 * KB)])
        self.assertEqual(p.chunk_count, 1)

    def test_size_above_limit_is_chunked(self) -> None:
        p = plan(4 * KB + 1, limit=4 * KB, chunk_size=KB)
        self.assertIs(p.strategy, Strategy.CHUNKED)
        self.assertEqual(p.chunk_size, KB)
        self.assertEqual(p.total_size, 4 * KB + 1)

    def test_chunks_tile_with_short_tail(self) -> None:
        p = plan(2 * KB + 10, limit=0, chunk_size=KB)
        chunks = list(p.chunks())
        self.assertEqual(chunks, [ChunkRange(0, KB), ChunkRange(KB, KB), ChunkRange(2 * KB, 10)])
        self.assertEqual(p.chunk_count, 3)
        self.assertEqual(chunks[-1].end, p.total_size)

    def test_exact_multiple_has_no_empty_tail(self) -> None:
        p = plan(3 * KB, limit=0, chunk_size=KB)
        chunks = list(p.chunks())
        self.assertEqual(len(chunks), 3)
        self.assertEqual(chunks[-1], ChunkRange(2 * KB, KB))
        self.assertTrue(all(c.length > 0 for c in chunks))

    def test_chunks_are_contiguous_and_restartable(self) -> None:
        p = plan(5 * KB + 3, limit=KB, chunk_size=2 * KB)
        first = list(p.chunks())
        second = list(p.chunks())
        self.assertEqual(first, second)

        offset = 0
        for chunk in first:
            self.assertEqual(chunk.offset, offset)
            offset = chunk.end
        self.assertEqual(offset, p.total_size)

    def test_empty_file_is_direct_without_ranges(self) -> None:
        p = plan(0, limit=0, chunk_size=KB)
        self.assertIs(p.strategy, Strategy.DIRECT)
        self.assertEqual(list(p.chunks()), [])
        self.assertEqual(p.chunk_count, 0)

    def test_invalid_arguments(self) -> None:
        with self.assertRaises(ValueError):
            plan(-1, limit=0, chunk_size=KB)
        with self.assertRaises(ValueError):
            plan(1, limit=-1, chunk_size=KB)
        with self.assertRaises(ValueError):
            plan(1, limit=0, chunk_size=0)


if __name__ == "__main__":
    unittest.main()
