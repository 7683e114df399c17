"""
In-process stand-in for the bookstore REST API.

Serves the same book/category endpoints as the real server so the suite can
run without a deployed backend. Data lives in memory and is reseeded on
reset(); nothing is persisted.
"""
import copy
import logging
import threading
import uuid
from functools import wraps

from flask import Flask, request, jsonify, g
from werkzeug.security import generate_password_hash, check_password_hash
from werkzeug.serving import make_server

logger = logging.getLogger(__name__)

SEED_USERS = [
    {"email": "john.doe@example.com", "password": "password123"},
]

SEED_CATEGORIES = ["Classic Literature", "Coming-of-Age", "Southern Gothic"]

# (title, author, description, price, pages, category index)
SEED_BOOKS = [
    ("The Great Gatsby", "F. Scott Fitzgerald",
     "A portrait of the Jazz Age in all of its decadence and excess.", 10.99, 180, 0),
    ("The Catcher in the Rye", "J.D. Salinger",
     "A story about teenage rebellion and alienation.", 8.99, 277, 1),
    ("To Kill a Mockingbird", "Harper Lee",
     "A novel about the serious issues of rape and racial inequality.", 12.49, 281, 2),
]


def _new_id():
    """24 hex characters, the shape of a document id on the real server."""
    return uuid.uuid4().hex[:24]


class BookstoreStore:
    """
    Users, categories and books held in plain dictionaries keyed by _id.
    Writes from request threads go through `lock`.
    """

    def __init__(self):
        self.lock = threading.Lock()
        self.users = {}
        for user in SEED_USERS:
            self.users[user["email"]] = {
                "_id": _new_id(),
                "email": user["email"],
                "password_hash": generate_password_hash(user["password"]),
            }
        self.reset()

    def reset(self):
        """Drops issued tokens and restores the seeded categories and books."""
        with self.lock:
            self.tokens = {}
            self.categories = {}
            self.books = {}

            category_ids = []
            for title in SEED_CATEGORIES:
                category = {"_id": _new_id(), "title": title}
                self.categories[category["_id"]] = category
                category_ids.append(category["_id"])

            for title, author, description, price, pages, category_index in SEED_BOOKS:
                book = {
                    "_id": _new_id(),
                    "title": title,
                    "author": author,
                    "description": description,
                    "price": price,
                    "pages": pages,
                    "category": category_ids[category_index],
                }
                self.books[book["_id"]] = book

    def login(self, email, password):
        """Returns a fresh token for valid credentials, None otherwise."""
        user = self.users.get(email)
        if not user or not check_password_hash(user["password_hash"], password):
            return None
        token = uuid.uuid4().hex
        with self.lock:
            self.tokens[token] = user["email"]
        return token

    def user_for_token(self, token):
        email = self.tokens.get(token)
        return self.users.get(email) if email else None

    def expand_book(self, book):
        """Copy of a book with its category id replaced by the category document."""
        expanded = copy.deepcopy(book)
        category = self.categories.get(book["category"])
        if category is not None:
            expanded["category"] = dict(category)
        return expanded


BOOK_FIELDS = ("title", "author", "description", "price", "pages", "category")


def create_app(store=None):
    """Builds the Flask application serving `store` (a fresh seeded store by default)."""
    app = Flask(__name__)
    store = store or BookstoreStore()
    app.config['STORE'] = store

    def login_required(f):
        """Rejects requests without a valid 'Authorization: Bearer <token>' header."""
        @wraps(f)
        def decorated_function(*args, **kwargs):
            header = request.headers.get('Authorization', '')
            scheme, _, token = header.partition(' ')
            user = store.user_for_token(token.strip()) if scheme.lower() == 'bearer' else None
            if not user:
                return jsonify({"message": "Authentication required or invalid credentials"}), 401
            g.current_user = user
            return f(*args, **kwargs)
        return decorated_function

    # --- Identity ---

    @app.route('/user/login', methods=['POST'])
    def login():
        data = request.get_json(silent=True) or {}
        email = data.get('email')
        password = data.get('password')
        if not email or not password:
            return jsonify({"message": "Missing email or password"}), 400

        token = store.login(email, password)
        if not token:
            return jsonify({"message": "Invalid email or password"}), 401
        return jsonify({"email": email, "accessToken": token}), 200

    # --- Categories ---

    @app.route('/category', methods=['GET'])
    def list_categories():
        return jsonify(list(store.categories.values())), 200

    @app.route('/category/<category_id>', methods=['GET'])
    def get_category(category_id):
        # Unknown ids answer 200 with a JSON null body, like the real server.
        return jsonify(store.categories.get(category_id)), 200

    @app.route('/category', methods=['POST'])
    @login_required
    def create_category():
        data = request.get_json(silent=True) or {}
        title = data.get('title')
        if not title:
            return jsonify({"message": "Missing required field: title"}), 400

        category = {"_id": _new_id(), "title": title}
        with store.lock:
            store.categories[category["_id"]] = category
        return jsonify(category), 200

    @app.route('/category/<category_id>', methods=['PUT'])
    @login_required
    def update_category(category_id):
        category = store.categories.get(category_id)
        if category is None:
            return jsonify({"message": "Category not found"}), 404

        data = request.get_json(silent=True) or {}
        if 'title' in data:
            with store.lock:
                category['title'] = data['title']
        return jsonify(category), 200

    @app.route('/category/<category_id>', methods=['DELETE'])
    @login_required
    def delete_category(category_id):
        with store.lock:
            category = store.categories.pop(category_id, None)
        if category is None:
            return jsonify({"message": "Category not found"}), 404
        return jsonify(category), 200

    # --- Books ---

    @app.route('/book', methods=['GET'])
    def list_books():
        return jsonify(list(store.books.values())), 200

    @app.route('/book/<book_id>', methods=['GET'])
    def get_book(book_id):
        book = store.books.get(book_id)
        return jsonify(store.expand_book(book) if book else None), 200

    @app.route('/book', methods=['POST'])
    @login_required
    def create_book():
        data = request.get_json(silent=True) or {}
        missing = [name for name in BOOK_FIELDS if data.get(name) in (None, '')]
        if missing:
            return jsonify({"message": f"Missing required book details ({', '.join(missing)})"}), 400
        if not isinstance(data['category'], str) or data['category'] not in store.categories:
            return jsonify({"message": "Category not found"}), 400

        book = {name: data[name] for name in BOOK_FIELDS}
        book["_id"] = _new_id()
        with store.lock:
            store.books[book["_id"]] = book
        return jsonify(book), 200

    @app.route('/book/<book_id>', methods=['PUT'])
    @login_required
    def update_book(book_id):
        book = store.books.get(book_id)
        if book is None:
            return jsonify({"message": "Book not found"}), 404

        data = request.get_json(silent=True) or {}
        with store.lock:
            for name in BOOK_FIELDS:
                if name in data:
                    book[name] = data[name]
        return jsonify(book), 200

    @app.route('/book/<book_id>', methods=['DELETE'])
    @login_required
    def delete_book(book_id):
        with store.lock:
            book = store.books.pop(book_id, None)
        if book is None:
            return jsonify({"message": "Book not found"}), 404
        return jsonify(book), 200

    return app


class LiveServer:
    """Runs a stand-in app on a background thread; port 0 picks a free port."""

    def __init__(self, store=None, host='127.0.0.1', port=0):
        self.store = store or BookstoreStore()
        self.host = host
        self._server = make_server(host, port, create_app(self.store), threaded=True)
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def base_url(self):
        return f"http://{self.host}:{self._server.server_address[1]}/"

    def start(self):
        self._thread.start()
        logger.info("Stand-in bookstore API listening on %s", self.base_url)
        return self

    def stop(self):
        self._server.shutdown()
        self._server.server_close()
        self._thread.join(timeout=5)
