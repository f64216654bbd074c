"""Test utilities for HTTP applications.

Request builders, JSON response assertions, and database fixture
helpers. All public names are re-exported here::

    from crumb.testing import create_json_request, assert_json_value
"""

from crumb.testing.assertions import (
    assert_json_content_type,
    assert_json_data,
    assert_json_value,
    get_array_value,
    get_json_data,
)
from crumb.testing.database import DatabaseTester, Fixture, quote_identifier
from crumb.testing.http import create_form_request, create_json_request, create_request

__all__ = [
    "DatabaseTester",
    "Fixture",
    "assert_json_content_type",
    "assert_json_data",
    "assert_json_value",
    "create_form_request",
    "create_json_request",
    "create_request",
    "get_array_value",
    "get_json_data",
    "quote_identifier",
]
