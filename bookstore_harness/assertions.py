"""
Shared checks for HTTP responses and JSON documents returned by the bookstore API.
Every failure is an AssertionError whose message names the violated expectation.
"""
import json
import numbers


def expect_status(response, expected=200):
    assert response.status_code == expected, (
        f"{response.method} {response.url}: expected status {expected}, "
        f"got {response.status_code}. Body: {response.excerpt()}"
    )


def expect_status_in(response, allowed):
    assert response.status_code in allowed, (
        f"{response.method} {response.url}: expected one of {sorted(allowed)}, "
        f"got {response.status_code}. Body: {response.excerpt()}"
    )


def expect_body(response):
    assert response.body.strip(), f"{response.method} {response.url}: response content should not be empty."


def parse_json(response, kind=None):
    """Parses the body, optionally requiring a JSON object (dict) or array (list)."""
    expect_body(response)
    try:
        document = json.loads(response.body)
    except json.JSONDecodeError as exc:
        raise AssertionError(
            f"{response.method} {response.url}: response is not valid JSON ({exc}). Body: {response.excerpt()}"
        ) from exc
    if kind is not None:
        expected_name = 'array' if kind is list else 'object'
        assert isinstance(document, kind), (
            f"{response.method} {response.url}: expected a JSON {expected_name}, got {type(document).__name__}."
        )
    return document


def expect_ok_json(response, kind=None):
    expect_status(response, 200)
    return parse_json(response, kind)


def expect_field(document, name):
    """Returns document[name], failing if it is absent, null or an empty string."""
    assert isinstance(document, dict), f"Expected a JSON object holding '{name}', got {type(document).__name__}."
    value = document.get(name)
    assert is_present(value), f"The field '{name}' should not be null or empty."
    return value


def expect_not_found(response):
    """
    A read of a deleted or unknown id answers with an empty body or a literal null.
    """
    body = response.body.strip()
    assert body in ('', 'null'), (
        f"{response.method} {response.url}: expected an empty or null body for a missing resource, "
        f"got {response.excerpt()}"
    )


# --- Predicates ---

def is_present(value):
    if value is None:
        return False
    if isinstance(value, (str, list, dict)):
        return len(value) > 0
    return True


def is_number(value):
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def is_integer(value):
    if isinstance(value, bool):
        return False
    if isinstance(value, numbers.Integral):
        return True
    return isinstance(value, float) and value.is_integer()


# --- Lookup helpers ---

def find_by_title(documents, title):
    """Returns the first document whose title equals `title`."""
    match = next((d for d in documents if isinstance(d, dict) and d.get('title') == title), None)
    assert match is not None, f"A book with title '{title}' was not found in the response."
    return match


def reference_id(value):
    """
    Id of a referenced document, whether the server sent the bare id or an
    expanded object such as {"_id": ..., "title": ...}.
    """
    if isinstance(value, dict):
        return value.get('_id')
    return value
