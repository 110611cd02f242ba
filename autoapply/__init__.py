"""Job listing scraper, throttled apply queue and form-field answer matcher."""
