"""Routing — pattern compilation and ordered first-match resolution.

Patterns compile to full-string matchers when they are registered;
resolution scans redirects, then routes, in registration order.
"""
