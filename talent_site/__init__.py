"""Talent agency website backend.

- Public pages: landing page with the talent directory, booking and question forms.
- Public API: list talents, submit a booking request, submit a question.
- Admin: a single configured account, JWT session cookie, read-only listings.

Storage (SQLite or Postgres) is optional; without it the site runs in demo mode and
data endpoints answer `storage_not_configured`.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
