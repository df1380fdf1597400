"""Infrastructure: outbound HTTP client and logging setup."""
