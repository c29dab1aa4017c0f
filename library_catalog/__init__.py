"""Library Catalog - Core Application Package

This package contains the core application modules including:
- Data models (book.py, user.py)
- Catalog management logic (library.py)
- Text file persistence (codec.py)
- CLI interface (main.py)
"""
