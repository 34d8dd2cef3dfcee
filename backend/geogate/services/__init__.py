"""Services Layer — request-level use cases orchestrating core and providers."""
