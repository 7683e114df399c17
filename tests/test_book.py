import pytest

from bookstore_harness.assertions import (
    expect_field,
    expect_not_found,
    expect_ok_json,
    expect_status,
    expect_status_in,
    find_by_title,
    is_integer,
    is_number,
    is_present,
    reference_id,
)


def get_all_books(client):
    books = expect_ok_json(client.get('book'), list)
    assert len(books) > 0, "Expected at least one book in the response."
    return books


def test_get_all_books(client):
    books = get_all_books(client)

    for book in books:
        title = book.get('title')
        pytest.assume(is_present(title), "The title should not be null or empty.")
        pytest.assume(is_present(book.get('author')), f"The author of '{title}' should not be null or empty.")
        pytest.assume(is_present(book.get('description')), f"The description of '{title}' should not be null or empty.")
        pytest.assume(is_number(book.get('price')), f"The price of '{title}' should be a number.")
        pytest.assume(is_integer(book.get('pages')), f"The pages of '{title}' should be an integer.")
        pytest.assume(is_present(book.get('category')), f"The category of '{title}' should not be null or empty.")


def test_get_book_by_title(client):
    book = find_by_title(get_all_books(client), "The Great Gatsby")
    assert book.get('author') == "F. Scott Fitzgerald", "The book author is not 'F. Scott Fitzgerald'"


def test_add_book(client, token):
    categories = expect_ok_json(client.get('category'), list)
    assert categories, "Expected at least one category to attach the new book to."
    category_id = expect_field(categories[0], '_id')

    new_book = {
        "title": "New test book",
        "author": "Some test author",
        "description": "Great test description",
        "price": 789.55,
        "pages": 100,
        "category": category_id,
    }
    created = expect_ok_json(client.post('book', json=new_book, token=token), dict)
    book_id = expect_field(created, '_id')

    try:
        book = expect_ok_json(client.get(f'book/{book_id}'), dict)
        for name in ('title', 'author', 'description', 'price', 'pages'):
            pytest.assume(book.get(name) == new_book[name], f"The book {name} should be {new_book[name]!r}, got {book.get(name)!r}.")
        pytest.assume(is_present(book.get('category')), "The book category should not be null or empty.")
        pytest.assume(reference_id(book.get('category')) == category_id, f"The book category should be '{category_id}'.")
    finally:
        expect_status(client.delete(f'book/{book_id}', token=token), 200)


def test_update_book(client, token):
    book = find_by_title(get_all_books(client), "The Catcher in the Rye")
    book_id = expect_field(book, '_id')

    updates = {"title": "Updated Book Title", "author": "Updated Author"}
    updated = expect_ok_json(client.put(f'book/{book_id}', json=updates, token=token), dict)

    # The PUT response already carries the new values.
    pytest.assume(updated.get('title') == updates['title'], f"The book title should be '{updates['title']}'.")
    pytest.assume(updated.get('author') == updates['author'], f"The book author should be '{updates['author']}'.")


def test_delete_book(client, token):
    book = find_by_title(get_all_books(client), "To Kill a Mockingbird")
    book_id = expect_field(book, '_id')

    expect_status(client.delete(f'book/{book_id}', token=token), 200)

    for _ in range(2):
        expect_not_found(client.get(f'book/{book_id}'))


def test_delete_book_requires_token(client):
    book_id = expect_field(get_all_books(client)[0], '_id')
    expect_status_in(client.delete(f'book/{book_id}'), {401, 403})

    # The rejected delete left the book in place.
    expect_ok_json(client.get(f'book/{book_id}'), dict)
