"""
Test helpers for mocking HTTP responses.
"""

import json
from typing import Any, Iterable, Optional
from unittest.mock import Mock


def create_mock_response(
    chunks: Iterable[bytes] = (b"",),
    error: Optional[Exception] = None,
) -> Mock:
    """Create a streamed requests response usable as a context manager."""
    mock_response = Mock()
    mock_response.iter_content.return_value = chunks
    if error is not None:
        mock_response.raise_for_status.side_effect = error
    else:
        mock_response.raise_for_status.return_value = None
    mock_response.__enter__ = Mock(return_value=mock_response)
    mock_response.__exit__ = Mock(return_value=None)
    return mock_response


def create_search_response(results: Any) -> Mock:
    """Create an iTunes search response with the given results value."""
    body = json.dumps({"resultCount": 1, "results": results}).encode()
    return create_mock_response([body])
