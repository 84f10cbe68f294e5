import unittest
from importlib import metadata
from unittest.mock import Mock, patch

from statuscheck.version import UNKNOWN_VERSION, VersionCache, distribution_version


class VersionCacheTests(unittest.TestCase):
    def test_resolver_is_called_once(self) -> None:
        resolver = Mock(return_value="1.4.2")
        cache = VersionCache(resolver)

        self.assertEqual(cache.get(), "1.4.2")
        self.assertEqual(cache.get(), "1.4.2")
        resolver.assert_called_once_with()

    def test_resolver_error_falls_back_and_is_cached(self) -> None:
        resolver = Mock(side_effect=OSError("manifest unreadable"))
        cache = VersionCache(resolver)

        with self.assertLogs("statuscheck.version", level="ERROR"):
            self.assertEqual(cache.get(), UNKNOWN_VERSION)
        self.assertEqual(cache.get(), UNKNOWN_VERSION)
        resolver.assert_called_once_with()

    def test_empty_version_falls_back(self) -> None:
        self.assertEqual(VersionCache(lambda: "").get(), UNKNOWN_VERSION)

    def test_reset_resolves_again(self) -> None:
        resolver = Mock(side_effect=["1.0.0", "1.0.1"])
        cache = VersionCache(resolver)

        self.assertEqual(cache.get(), "1.0.0")
        cache.reset()
        self.assertEqual(cache.get(), "1.0.1")

    def test_default_resolver_reads_distribution_metadata(self) -> None:
        with patch("statuscheck.version.metadata.version", return_value="2.0.0") as mock_version:
            self.assertEqual(distribution_version(), "2.0.0")
        mock_version.assert_called_once()

    def test_missing_distribution_falls_back(self) -> None:
        with patch(
            "statuscheck.version.metadata.version",
            side_effect=metadata.PackageNotFoundError("ow-status-check"),
        ):
            with self.assertLogs("statuscheck.version", level="ERROR"):
                self.assertEqual(VersionCache().get(), UNKNOWN_VERSION)


if __name__ == "__main__":
    unittest.main()
