from collections.abc import Mapping
from typing import Any, Sequence

from absl.testing import absltest


class TestCase(absltest.TestCase):
    """
    Base class for all tests.
    """

    def assert_entries_equal(
        self, mapping: Mapping[Any, Any], expected_entries: Sequence[tuple[Any, Any]]
    ) -> None:
        """Assert that a mapping holds exactly the expected entries, in the expected order.

        Args:
            mapping (Mapping): The mapping under test, typically a Collection
            expected_entries (Sequence[tuple]): The expected ``(key, value)`` pairs in iteration order
        """
        self.assertEqual(list(mapping.items()), list(expected_entries))
        self.assertLen(mapping, len(expected_entries))
