"""Library Management System - core package

This package contains the core modules:
- Library facade (library.py)
- User and book stores (user_store.py, book_store.py)
- Permission checks (auth.py)
- Data models (user.py, book.py)
- Input validation and message catalogs (validators.py, messages.py)
"""
