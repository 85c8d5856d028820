"""
High-level use cases for the eventdesk API.

Each service orchestrates the Record Store to implement the business
rules (validate and submit, search and tally, admin login). Routers call
these services instead of touching storage directly.
"""
