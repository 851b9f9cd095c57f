import hashlib
import io
import os
import tempfile
import unittest

from gdrivexfer.errors import LocalIOError
from gdrivexfer.models import DriveItem, DriveItemType, FileFacet, FolderFacet, Hashes
from gdrivexfer.util.hashing import (
    HashAlgorithm,
    digest,
    digest_file,
    file_hashes,
    matches,
)


class TestUtilHashing(unittest.TestCase):
    def setUp(self) -> None:
        self.payload = os.urandom(10 * 1024 + 7)
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "blob.dat")
        with open(self.path, "wb") as f:
            f.write(self.payload)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_digest_stream_small_blocks(self) -> None:
        got = digest(io.BytesIO(self.payload), HashAlgorithm.SHA1, block_size=1000)
        self.assertEqual(got, hashlib.sha1(self.payload).hexdigest())

        got = digest(io.BytesIO(self.payload), "sha256", block_size=4096)
        self.assertEqual(got, hashlib.sha256(self.payload).hexdigest())
        self.assertEqual(got, got.lower())

    def test_algorithm_name_spellings(self) -> None:
        for name in ("SHA-1", "sha-1", "SHA1", " sha_1 "):
            self.assertIs(HashAlgorithm(name), HashAlgorithm.SHA1)
        for name in ("SHA-256", "Sha256", "sha_256"):
            self.assertIs(HashAlgorithm(name), HashAlgorithm.SHA256)

        got = digest(io.BytesIO(self.payload), "SHA-256")
        self.assertEqual(got, hashlib.sha256(self.payload).hexdigest())

    def test_digest_rejects_unknown_algorithm(self) -> None:
        with self.assertRaises(ValueError):
            digest(io.BytesIO(b"x"), "md5")

    def test_digest_file_and_file_hashes(self) -> None:
        self.assertEqual(
            digest_file(self.path, HashAlgorithm.SHA256),
            hashlib.sha256(self.payload).hexdigest(),
        )
        hashes = file_hashes(self.path)
        self.assertEqual(hashes.sha1, hashlib.sha1(self.payload).hexdigest().upper())
        self.assertEqual(hashes.sha256, hashlib.sha256(self.payload).hexdigest().upper())

    def test_missing_file_raises_local_io_error(self) -> None:
        missing = os.path.join(self.tmp.name, "nope")
        with self.assertRaises(LocalIOError):
            digest_file(missing)
        with self.assertRaises(LocalIOError):
            file_hashes(missing)

    def test_matches(self) -> None:
        good = DriveItem(
            name="blob.dat",
            type=DriveItemType.FILE,
            size_bytes=len(self.payload),
            file=FileFacet(mime_type="application/octet-stream", hashes=file_hashes(self.path)),
        )
        self.assertTrue(matches(good, self.path))

        bad = DriveItem(
            name="blob.dat",
            type=DriveItemType.FILE,
            file=FileFacet(
                mime_type="application/octet-stream",
                hashes=Hashes(sha1="0" * 40, sha256=""),
            ),
        )
        self.assertFalse(matches(bad, self.path))

        no_hashes = DriveItem(
            name="blob.dat",
            type=DriveItemType.FILE,
            file=FileFacet(mime_type="application/octet-stream"),
        )
        self.assertFalse(matches(no_hashes, self.path))

        folder = DriveItem(name="d", type=DriveItemType.FOLDER, folder=FolderFacet())
        self.assertFalse(matches(folder, self.path))


if __name__ == "__main__":
    unittest.main()
